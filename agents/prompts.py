from core.catalog import INTENT_DESCRIPTIONS, classifiable_intents

# -----------------------------
# Classification
# -----------------------------
CLASSIFICATION_PROMPT = """You are an e-commerce chatbot intent classifier. Analyze the user message and return JSON.

AVAILABLE INTENTS:
{intents}

ENTITY EXTRACTION:
- Extract product names exactly as the user wrote them into "products"
- Extract categories (men/women/children) and product types (shirt/pant/kurta)
- Extract order numbers if mentioned (format: ORD-XXXXX or just numbers)

Rules:
1. Use ONLY intents from the list above. If nothing fits, use "general".
2. List the most likely intent first.
3. Use null for entities that are not mentioned.

USER MESSAGE: "{message}"

Return ONLY this JSON format:
{{"intents":["intent_name"],"entities":{{"products":[],"category":null,"productType":null,"orderNumber":null}},"confidence":"high|medium|low"}}"""


def build_classification_prompt(message: str, role: object) -> str:
    lines = [
        f"- {intent.value}: {INTENT_DESCRIPTIONS[intent]}"
        for intent in classifiable_intents(role)
    ]
    # The message is embedded inside quotes; keep it from closing them
    safe_message = message.replace('"', "'")
    return CLASSIFICATION_PROMPT.format(intents="\n".join(lines), message=safe_message)


# -----------------------------
# Replies
# -----------------------------
VIEW_REPLY_PROMPT = """You are a helpful shopping assistant for an e-commerce store. Be brief, friendly, and use emojis sparingly.

DATA:
{context}

User asked: "{message}"

Respond naturally using the data above. Format prices with ₹. Keep response concise."""

GENERAL_REPLY_PROMPT = """You are a helpful shopping assistant for this specific e-commerce website. The user said: "{message}"

If the user's query is about general topics (like weather, general knowledge, math, coding) or unrelated to shopping on this website, politely decline and say "Sorry, I am here to answer queries related to the website."

Only answer if it relates to shopping, products, orders, cart, wishlist, or account help. Provide a brief, helpful response."""


def build_view_reply_prompt(context: str, message: str) -> str:
    return VIEW_REPLY_PROMPT.format(context=context, message=message)


def build_general_reply_prompt(message: str) -> str:
    return GENERAL_REPLY_PROMPT.format(message=message)
