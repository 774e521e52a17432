from pathlib import Path
import os

PROTOTYPES_DIR_ENV = "GALLERY_PROTOTYPES_DIR"
GALLERY_DIR_ENV = "GALLERY_OUTPUT_DIR"
CACHE_FILE_ENV = "GALLERY_CACHE_FILE"


def get_deploy_timeout() -> int:
    """
    Timeout in seconds for each call to the deploy CLI.

    Priority:
    - GALLERY_DEPLOY_TIMEOUT if it is a positive integer
    - 60 seconds
    """
    env_value = os.getenv("GALLERY_DEPLOY_TIMEOUT")
    if env_value:
        try:
            timeout = int(env_value)
        except ValueError:
            timeout = 0
        if timeout > 0:
            return timeout
        print(f"⚠️  Ignoring GALLERY_DEPLOY_TIMEOUT={env_value!r}, using 60 seconds")
    return 60


PROTOTYPES_DIR = Path(os.getenv(PROTOTYPES_DIR_ENV, "prototypes")).expanduser()
GALLERY_DIR = Path(os.getenv(GALLERY_DIR_ENV, "gallery")).expanduser()
DEPLOYMENT_CACHE_NAME = "deployments.json"
DEPLOYMENT_CACHE = GALLERY_DIR / DEPLOYMENT_CACHE_NAME

ENTRY_FILE = "index.html"
DEPLOY_CONFIG_FILE = "vercel.json"
EXCLUDE_DIRS = {"node_modules", ".git", ".DS_Store"}
DEFAULT_DESCRIPTION = "Interactive prototype"

PROJECT_PREFIX = os.getenv("GALLERY_PROJECT_PREFIX", "prototype-")
GALLERY_PROJECT = os.getenv("GALLERY_PROJECT_NAME", "prototype-gallery")
GALLERY_TITLE = os.getenv("GALLERY_TITLE", "Prototype Gallery")
GALLERY_DESCRIPTION = os.getenv("GALLERY_DESCRIPTION", "Interactive prototypes")

DEPLOY_COMMAND = os.getenv("GALLERY_DEPLOY_COMMAND", "vercel")
DEPLOY_TIMEOUT = get_deploy_timeout()
DEPLOY_URL_PATTERN = r"https://[^\s]+\.vercel\.app"
