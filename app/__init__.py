"""
Legal Assistant

Bilingual (Arabic/English) legal translation and memorandum drafting service.
"""

__version__ = "1.0.0"
__author__ = "Legal AI Team"
__description__ = "Bilingual legal translation and memorandum drafting service"
