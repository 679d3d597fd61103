# Remote Endpoints
API_SCRIPT_URL = "https://hcaptcha.com/1/api.js"
API_SCRIPT_PARAMS = {"render": "explicit", "onload": "hcaptchaOnLoad"}
CHECKSITECONFIG_URL = "https://api2.hcaptcha.com/checksiteconfig"
ASSET_HOST = "https://newassets.hcaptcha.com"

# Version Detection
VERSION_PATTERN = r"/captcha/v1/([a-f0-9]+)/static"
PROVENANCE_TEMPLATE = "/* Source URL: {url} */\n"

# Notification Settings
NOTIFIER_USERNAME = "hCaptcha Monitor"
NOTIFIER_AVATAR_URL = "https://i.imgur.com/lhYfz5H.png"
NEW_VERSION_COLOR = 0x0074BF
DISCORD_MAX_FIELD_LENGTH = 1024
DISCORD_MAX_TITLE_LENGTH = 256

# Default Configuration Values
DEFAULT_CONFIG_PATH = "config.json"
DEFAULT_OUTPUT_DIR = "output"
DEFAULT_REQUEST_TIMEOUT = 30
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/58.0.3029.110 Safari/537.3"
)
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FILE = "logs/monitor.log"
DEFAULT_LOG_FORMAT = "text"  # text or json
DEFAULT_LOG_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_LOG_BACKUP_COUNT = 5
DEFAULT_LOG_TIMEZONE = "UTC"
LOG_THROTTLE_SECONDS = 60
