# Default outreach macros, seeded into the template table on first start.
# Placeholders are substituted by core.templating.render_template.

MESSAGE_TEMPLATES = {
    "initial_outreach": {
        "title": "Initial Outreach",
        "subject": "Collaboration Opportunity with [Brand Name]",
        "body": (
            "Hi [Name],\n\n"
            "We love your content on TikTok! We'd like to send you some of our products to try out. "
            "Let us know if you're interested.\n\n"
            "Best,\n[Brand Team]"
        ),
    },
    "rate_negotiation": {
        "title": "Rate Negotiation",
        "subject": "Re: Collaboration Rates",
        "body": (
            "Hi [Name],\n\n"
            "Thanks for getting back to us. Our budget for this campaign is typically around $[Amount]. "
            "Does that work for you?\n\nBest,"
        ),
    },
    "shipping_confirmation": {
        "title": "Shipping Confirmation",
        "subject": "Your package is on the way!",
        "body": (
            "Hi [Name],\n\n"
            "Great news! We've shipped your package. Tracking number: [Tracking].\n\n"
            "Can't wait to see what you create!"
        ),
    },
    "payment_details": {
        "title": "Payment Details Request",
        "subject": "Invoice & Payment Details",
        "body": (
            "Hi [Name],\n\n"
            "Please send over your invoice and PayPal details so we can process your payment.\n\n"
            "Thanks!"
        ),
    },
}
