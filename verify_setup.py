"""
Setup verification script for the PaperGen backend.
Checks dependencies, configuration and the external AI services.
"""
import asyncio
import sys
import os
from typing import List, Tuple

# Color codes for terminal output
GREEN = "\033[92m"
RED = "\033[91m"
YELLOW = "\033[93m"
BLUE = "\033[94m"
RESET = "\033[0m"


def print_status(message: str, status: bool):
    """Print colored status message."""
    symbol = f"{GREEN}✓{RESET}" if status else f"{RED}✗{RESET}"
    print(f"{symbol} {message}")


async def check_python_version() -> bool:
    """Check Python version is 3.10+."""
    version = sys.version_info
    if version.major == 3 and version.minor >= 10:
        print_status(f"Python version: {version.major}.{version.minor}.{version.micro}", True)
        return True
    else:
        print_status(f"Python version {version.major}.{version.minor} (requires 3.10+)", False)
        return False


async def check_dependencies() -> bool:
    """Check if required packages are installed."""
    required_packages = [
        "fastapi",
        "uvicorn",
        "pydantic_settings",
        "httpx",
        "multipart",
        "fitz",
        "docx",
        "pptx",
        "PIL",
    ]

    all_installed = True
    for package in required_packages:
        try:
            __import__(package)
            print_status(f"Package '{package}' installed", True)
        except ImportError:
            print_status(f"Package '{package}' missing", False)
            all_installed = False

    return all_installed


async def check_env_file() -> bool:
    """Check if .env file exists."""
    if os.path.exists(".env"):
        print_status(".env file exists", True)
        return True
    else:
        print_status(".env file missing (set GEMINI_API_KEY and PIXABAY_API_KEY)", False)
        return False


async def check_gemini() -> bool:
    """Check the Gemini key is set and the configured model is reachable."""
    import httpx

    from papergen.config import settings

    if not settings.GEMINI_API_KEY:
        print_status("GEMINI_API_KEY is not set", False)
        return False

    url = f"{settings.GEMINI_BASE_URL.rstrip('/')}/models/{settings.GEMINI_MODEL}"
    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.get(url, headers={"x-goog-api-key": settings.GEMINI_API_KEY})
    except httpx.HTTPError as e:
        print_status(f"Gemini connection failed: {str(e)}", False)
        return False

    if response.status_code == 200:
        print_status(f"Gemini model '{settings.GEMINI_MODEL}' is available", True)
        return True

    print_status(f"Gemini API error (status {response.status_code})", False)
    print(f"  {YELLOW}Check GEMINI_API_KEY and GEMINI_MODEL in .env{RESET}")
    return False


async def check_pixabay() -> bool:
    """Pixabay is optional; a missing key only disables image decoration."""
    from papergen.config import settings

    if settings.PIXABAY_API_KEY:
        print_status("PIXABAY_API_KEY is set", True)
    else:
        print_status("PIXABAY_API_KEY is not set (images disabled)", True)
        print(f"  {YELLOW}Documents will be generated without stock images{RESET}")
    return True


async def main():
    """Run all verification checks."""
    print(f"\n{BLUE}{'='*60}{RESET}")
    print(f"{BLUE}PaperGen Backend - Setup Verification{RESET}")
    print(f"{BLUE}{'='*60}{RESET}\n")

    checks: List[Tuple[str, callable]] = [
        ("Python Version", check_python_version),
        ("Dependencies", check_dependencies),
        ("Environment File", check_env_file),
        ("Gemini API", check_gemini),
        ("Pixabay API", check_pixabay),
    ]

    results = []

    for check_name, check_func in checks:
        print(f"\n{BLUE}Checking {check_name}...{RESET}")
        try:
            result = await check_func()
            results.append(result)
        except Exception as e:
            print_status(f"Error during check: {str(e)}", False)
            results.append(False)

    # Summary
    print(f"\n{BLUE}{'='*60}{RESET}")
    passed = sum(results)
    total = len(results)

    if passed == total:
        print(f"{GREEN}✓ All checks passed! ({passed}/{total}){RESET}")
        print(f"\n{GREEN}You're ready to run the backend:{RESET}")
        print(f"  python -m papergen.main")
        print(f"  or")
        print(f"  uvicorn papergen.main:app --reload")
    else:
        print(f"{RED}✗ Some checks failed ({passed}/{total} passed){RESET}")
        print(f"\n{YELLOW}Please fix the issues above before running the backend.{RESET}")
        sys.exit(1)

    print(f"{BLUE}{'='*60}{RESET}\n")


if __name__ == "__main__":
    asyncio.run(main())
