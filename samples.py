import random

SAMPLE_MESSAGES = {
    "spam": [
        "CONGRATULATIONS! You've won $1,000,000! Click here immediately to claim your prize before it expires!",
        "URGENT: Your account will be closed! Click this link now to verify your information and save your account.",
        "FREE MONEY! Earn $500 per day working from home! No experience needed! Call now: 555-123-4567",
        "You have been selected as a winner in our lottery! Claim your inheritance of $2 million dollars now!",
        "AMAZING DEAL! 90% OFF everything! Limited time offer! Buy now or miss out forever! Click here!",
    ],
    "safe": [
        "Hi, just wanted to check if we're still meeting for lunch tomorrow at 12 PM. Let me know!",
        "Thank you for your purchase. Your order #12345 has been shipped and will arrive in 3-5 business days.",
        "Reminder: Your appointment with Dr. Smith is scheduled for tomorrow at 2 PM. Please arrive 15 minutes early.",
        "Happy birthday! Hope you have a wonderful day celebrating with family and friends.",
        "The meeting has been moved to Conference Room B. See you there at 3 PM.",
    ],
}


def random_sample() -> str:
    """Pick any sample, spam or safe."""
    return random.choice(SAMPLE_MESSAGES["spam"] + SAMPLE_MESSAGES["safe"])
