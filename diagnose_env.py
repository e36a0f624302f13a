"""
Diagnostic script to check .env loading, fonts and OpenRouter connectivity.
Run this to troubleshoot configuration before starting the server:

    python diagnose_env.py            # configuration only
    python diagnose_env.py --probe    # also send one test prompt to the model
"""

import sys
from pathlib import Path

from dotenv import load_dotenv

from app.config import get_settings
from app.models.styles import list_styles
from app.services.openrouter_client import OpenRouterClient, PlacementAnalysisError
from app.services.text_renderer import load_font

print("\n" + "=" * 70)
print("🔍 ENVIRONMENT DIAGNOSTICS")
print("=" * 70 + "\n")

# 1. Python version
print(f"1. Python Version: {sys.version}")
print()

# 2. .env file
env_path = Path(__file__).parent / ".env"
print(f"2. .env File Location: {env_path}")
print(f"   Exists: {env_path.exists()}")
if env_path.exists():
    print(f"   Loaded: {load_dotenv(dotenv_path=env_path, override=False)}")
print()

settings = get_settings()

# 3. Settings
print("3. Settings:")
key = settings.openrouter_api_key
if key:
    print(f"   ✓ OPENROUTER_API_KEY is set: {key[:12]}..." if len(key) > 12 else "   ✓ OPENROUTER_API_KEY is set")
else:
    print("   ✗ OPENROUTER_API_KEY is NOT set (AI placement disabled)")
print(f"   Base URL: {settings.openrouter_base_url}")
print(f"   Model: {settings.openrouter_model}")
print(f"   Timeout: {settings.openrouter_timeout}s")
print(f"   FONT_DIR: {settings.font_dir or 'Not set (system fonts only)'}")
print(f"   JPEG_QUALITY: {settings.jpeg_quality}")
print(f"   LOG_LEVEL: {settings.log_level}")
print()

# 4. Fonts
print("4. Fonts:")
for style in list_styles():
    font = load_font(style.font_family, 32, settings.font_dir)
    resolved = getattr(font, "path", None) or "Pillow default"
    print(f"   {style.font_key:<12} {style.font_family:<18} -> {resolved}")
print()

# 5. Connectivity
issues = []
if not key:
    issues.append("⚠️  OPENROUTER_API_KEY not set")

if "--probe" in sys.argv[1:]:
    print("5. OpenRouter Probe:")
    if key:
        client = OpenRouterClient.from_settings(settings)
        print(f"   📤 Sending test prompt to: {client.completions_url}")
        try:
            reply = client.ping()
            print(f"   ✓ Model replied: {reply.strip()[:80]}")
        except PlacementAnalysisError as exc:
            print(f"   ✗ Probe failed: {exc}")
            issues.append(f"❌ OpenRouter probe failed: {exc}")
    else:
        print("   ⚠ Cannot probe (no API key)")
    print()

print("=" * 70)
print("📋 SUMMARY")
print("=" * 70)
if not issues:
    print("✅ All checks passed! Configuration looks good.")
else:
    print("Issues found:\n")
    for issue in issues:
        print(f"  {issue}")
    if not key:
        print("\n  Add OPENROUTER_API_KEY=your_key to .env to enable AI placement.")
print("\nStart the server with:")
print("  uvicorn app.main:app --reload")
print("=" * 70 + "\n")
