"""Customer messaging prompts and the canned templates used when no LLM is available."""

SYSTEM_PROMPT = """You write short, {tone} messages for {business_name}, a lawn care business.
Plain text only, no markdown, no placeholders in square brackets."""

PROMPTS = {
    "eta": """SMS to {customer_name}: "I'm on my way to {address}". 15 words max.""",
    "rain_delay": """SMS for rain delay, moving the visit to {new_date}. 20 words max.""",
    "review_request": """SMS asking {customer_name} for a review of today's lawn visit. 20 words max.""",
    "accept": """Write a short friendly email to {customer_name} confirming their lawn visit at {address} on {scheduled_date}.""",
    "reject": """Write a short polite email to {customer_name} explaining we cannot take on the job at {address} right now.""",
    "invoice": """Write a short friendly email to {customer_name} with their invoice for {currency}{price_quote:.2f}.""",
}

TEMPLATES = {
    "eta": "Hi {customer_name}, I'm on my way!",
    "rain_delay": "Due to rain we've moved your lawn visit to {new_date}. Thanks for understanding!",
    "review_request": "Thanks for choosing {business_name}! Please leave us a review.",
    "accept": "Hi {customer_name}, your lawn visit at {address} is booked for {scheduled_date}.",
    "reject": "Hi {customer_name}, unfortunately we can't take on your job at {address} right now.",
    "invoice": "Hi {customer_name}, please find your invoice for {currency}{price_quote:.2f} attached.",
}

ROUTE_PROMPT = """You are an expert route optimizer for a lawn care crew starting at {start_hour}:00.
Order these visits to minimise driving time.

Jobs (id, address, postcode, minutes on site):
{jobs}

Return RAW JSON: {{"orderedJobIds": ["..."], "reasoning": "one sentence"}}"""
