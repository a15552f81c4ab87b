"""
Prompt and reply templates
All hardcoded text sent to, or standing in for, the language models lives here.
"""

# Persona for the chat-style provider
AGENT_SYSTEM_PROMPT = (
    "You are a professional real estate AI agent. Provide helpful, accurate responses "
    "about properties, locations, and real estate advice. Be conversational and informative."
)

# Context block shared by every generation tier
RESPONSE_CONTEXT_TEMPLATE = """
User Query: "{query}"
Properties Found: {count}
Search Filters: {filters}
Property Details: {preview}

Generate a helpful, conversational response about these real estate search results. Be specific about the properties found and offer relevant advice.
"""

# Single preview line: title - type in location - price
PROPERTY_PREVIEW_TEMPLATE = "{title} - {type} in {location} - ₹{price}"

# Deterministic replies used when no model answers
NO_RESULTS_TEMPLATE = (
    "I couldn't find any properties matching \"{query}\". Let me help you explore other options. "
    "Would you like to adjust your budget, location, or property type?"
)

SINGLE_RESULT_TEMPLATE = (
    "Perfect! I found exactly one property that matches your search: {title} in {location}. "
    "It's a {type} priced at ₹{price}. Would you like more details about this property?"
)

MULTIPLE_RESULTS_TEMPLATE = (
    "Great! I found {count} properties matching your criteria. The options range from "
    "₹{min_price} to ₹{max_price}. Would you like me to show you the most suitable "
    "options or refine the search further?"
)

# Canned owner-contact outcomes
OWNER_CONTACT_MESSAGES = (
    "✅ Owner contacted successfully! They're available for property viewing this weekend.",
    "\U0001f4de Spoke with the owner - they're open to negotiations and can arrange a visit tomorrow.",
    "\U0001f3e1 Owner confirms the property is available. Best viewing time is in the evening.",
    "\U0001f4b0 Good news! Owner is motivated to close quickly and open to reasonable offers.",
    "\U0001f4cb Owner would like to discuss terms directly. I can facilitate the introduction.",
)
