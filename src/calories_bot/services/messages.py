"""User-facing reply texts."""

UNIDENTIFIED_USER = "Sorry, couldn't identify your user account."

WELCOME_NEW = (
    "Welcome to Calories.fun! To get started, please provide your "
    "Zetachain wallet address (starting with 0x):"
)
WELCOME_BACK = "Welcome back to Calories.fun! Type /help to see available commands."

HELP = (
    "Available commands:\n"
    "/start - Start the bot and register\n"
    "/help - Show this help message\n"
    "/wallet - Link your wallet\n"
    "/submit - Submit a meal photo\n"
    "/referral - Get your referral link"
)

WALLET_PROMPT = "Please provide your Zetachain wallet address (starting with 0x):"
INVALID_WALLET = (
    "Invalid wallet address format. Please provide a valid Zetachain wallet "
    "address starting with 0x and containing 42 characters."
)

REGISTER_FIRST = "You need to register first. Please use /start command."

SUBMIT_PROMPT = (
    "Please send a photo of your meal for calorie evaluation.\n\n"
    "Make sure to:\n"
    "- Send it as a photo, not as a file\n"
    "- Send only one clear image of your meal"
)

SUBMIT_FIRST = "To analyze a meal photo, please use the /submit command first."
EMPTY_PHOTO = "Sorry, we couldn't process your photo. Please try again with /submit."
PHOTO_RECEIVED = "Photo received! Analyzing your meal..."
ANALYSIS_FAILED = (
    "Sorry, we encountered an error while analyzing your photo. "
    "Please try again with /submit."
)

COMMAND_FAILED = (
    "Sorry, there was an error processing your command. Please try again later."
)


def registered(wallet_address: str) -> str:
    return (
        f"Successfully registered with wallet address {wallet_address}. "
        "Welcome to Calories.fun! Type /help to see available commands."
    )


def echo(text: str) -> str:
    return f"You said: {text}"


def calorie_estimate(calories: int) -> str:
    return (
        f"Our AI estimates that your meal has about {calories} calories. "
        "Tokens will be rewarded accordingly!"
    )


def referral(link: str) -> str:
    return f"Share this referral link with your friends: {link}"
