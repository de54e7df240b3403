"""
Bot-facing copy.
Safe to edit per deployment.
No logic. No imports from services.
"""

BOT_NAME = "PostCraft"

WEB_APP_HINT = "Please use the web app for the full experience."

GREETING_TEXT = (
    f"👋 Hello! I'm {BOT_NAME}, your Gemini-powered social media assistant. "
    "How can I help you today?"
)

ATTACHMENT_HELP_TEXT = (
    "I received an attachment! To edit an image, use the format "
    "'Edit this image: [your prompt]' and attach the image. "
    "Or choose an option below:"
)

POSTING_LIMITS_TEXT = (
    "I can't post anything on my own from a chat message. Publishing is "
    "restricted by platform security and API limits.\n\n"
    "When I draft a post for you (a daily post, a story or an edited image), "
    "reply 'yes, post it' and I'll publish that draft to the Page. "
    "You can also copy the content and share it yourself.\n\n"
    "How can I help you create something today?"
)

SCHEDULE_HELP_TEXT = (
    "⏰ Scheduling lives in the web app (your browser). Generate content here, "
    "then use the web app to keep a local schedule of when to post it. "
    "Nothing is posted automatically. "
    "Meanwhile, try 'Post inspirational story' or 'Edit this image: ...' with an attachment."
)

NOTHING_PENDING_TEXT = (
    "There's nothing waiting to be published. Ask me for a daily post, a story "
    "or an image edit first, then reply 'yes, post it'."
)

PENDING_CREATED_HINT = "Reply 'yes, post it' to publish this to the Page."

PUBLISHED_TEXT = "✅ Published to the Page! Post ID: {post_id}"

PUBLISH_FAILED_TEXT = "❌ Failed to publish to the Page: {error}"

INTERNAL_ERROR_TEXT = (
    "Apologies, I encountered an internal error while processing your request. "
    "Please try again later."
)

DRAFT_STORAGE_ERROR_TEXT = (
    "Sorry, I couldn't load or save your draft post right now. Please try again in a moment."
)

EDIT_NEEDS_PROMPT_TEXT = "Please tell me how you want to edit the image after 'edit this image:'."

EDIT_NEEDS_IMAGE_TEXT = (
    "To edit an image, please send an image attachment with your 'edit this image:' command."
)

FEATURE_PROMPTS = {
    "chat": "Okay, let's chat! What's on your mind or what kind of story would you like?",
    "daily_post": (
        "What kind of daily post would you like? Try 'Post funny story' or "
        "'Post a sad story as a regular post with voice'."
    ),
    "edit_image": (
        "Please send me an image with your editing request, for example: "
        "'Edit this image: add a hat'."
    ),
    "create_story": (
        "Tell me what to write about! Try 'Create a story about a lighthouse keeper with a song'."
    ),
    "schedule_post": SCHEDULE_HELP_TEXT,
}

# Quick reply titles (Messenger caps titles at 20 chars)
SHORTCUT_TITLES = {
    "confirm_post": "✅ Post it",
    "chat": "💬 Chat & Story",
    "edit_image": "✂️ Edit Image",
    "daily_post": "🗓️ Daily Post",
    "create_story": "📝 Create Story",
    "schedule_post": "⏰ Schedule Post",
}
