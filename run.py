#!/usr/bin/env python3
"""
Legal Assistant Startup Script

Validates the installation and configuration, optionally prepares the
database, then serves the API with uvicorn.
"""

import sys
import argparse
import importlib.util
import uvicorn

# import name -> distribution name
REQUIRED_PACKAGES = {
    "fastapi": "fastapi",
    "sqlalchemy": "sqlalchemy",
    "pydantic_settings": "pydantic-settings",
    "passlib": "passlib[bcrypt]",
    "jose": "python-jose[cryptography]",
    "anthropic": "anthropic",
}

DEVELOPMENT_SECRET = "fallback-secret-for-development"

def check_requirements():
    """Report any required package that cannot be imported."""
    missing = [dist for module, dist in REQUIRED_PACKAGES.items() if importlib.util.find_spec(module) is None]

    if missing:
        print(f"❌ Missing dependencies: {', '.join(missing)}")
        print("Please run: pip install -e .")
        return False

    print("✅ All required dependencies are installed")
    return True

def check_environment():
    """Validate the loaded settings (environment variables and .env)."""
    from app.config import settings

    if settings.is_production and settings.session_secret == DEVELOPMENT_SECRET:
        print("❌ SESSION_SECRET must be set in production")
        return False

    if settings.is_cross_origin and not settings.is_production:
        print("⚠️  CORS_ORIGIN is set outside production: SameSite=None cookies need HTTPS in browsers")

    if not (settings.anthropic_api_key and settings.anthropic_api_key.strip()):
        print("⚠️  ANTHROPIC_API_KEY is not set: translation and drafting will answer 503")

    if bool(settings.admin_email) != bool(settings.admin_password):
        print("⚠️  Set both ADMIN_EMAIL and ADMIN_PASSWORD to bootstrap an admin account")

    print(f"✅ Configuration loaded ({settings.environment}, model {settings.claude_model})")
    return True

def initialize_database():
    """Create tables and the configured admin account."""
    from app.database import init_db

    try:
        init_db()
    except Exception as e:
        print(f"❌ Database initialization failed: {e}")
        return False

    print("✅ Database is ready")
    return True

def main():
    """Main startup function."""
    from app.config import settings

    parser = argparse.ArgumentParser(description="Legal Assistant")
    parser.add_argument("--host", default=settings.api_host, help="Host to bind to")
    parser.add_argument("--port", type=int, default=settings.api_port, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument("--workers", type=int, default=1, help="Number of worker processes")
    parser.add_argument("--log-level", default="debug" if settings.debug else "info", help="Log level")
    parser.add_argument("--check-only", action="store_true", help="Only check requirements and exit")
    parser.add_argument("--init-db", action="store_true", help="Create tables and the admin account, then exit")

    args = parser.parse_args()

    print("⚖️  Legal Assistant")
    print("=" * 40)

    if not check_requirements() or not check_environment():
        sys.exit(1)

    if args.init_db:
        sys.exit(0 if initialize_database() else 1)

    if args.check_only:
        print("✅ All checks passed! System is ready to start.")
        sys.exit(0)

    print(f"\n🚀 Serving on http://{args.host}:{args.port} (health: /health)")
    print("=" * 40)

    try:
        uvicorn.run(
            "app.main:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            workers=1 if args.reload else args.workers,
            log_level=args.log_level,
            access_log=True
        )
    except KeyboardInterrupt:
        print("\n👋 Shutting down Legal Assistant...")

if __name__ == "__main__":
    main()
