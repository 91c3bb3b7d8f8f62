# Outreach template rendering

from typing import Optional

from schemas.seeding import Influencer


def render_template(body: str, influencer: Influencer, brand: Optional[str] = None) -> str:
    """
    Fill the placeholders of an outreach macro for one creator.

    Supports the bracket style used by the stored macros ([Name], [Handle],
    [Amount], [Tracking], [Brand Name]) and the curly {name}/{handle} style.
    Placeholders without a value are left in place for the operator to edit.
    """
    values = {
        "[Name]": influencer.name,
        "{name}": influencer.name,
        "[Handle]": influencer.handle,
        "{handle}": influencer.handle,
    }
    if influencer.contract.total_amount:
        values["[Amount]"] = f"{influencer.contract.total_amount:,.0f}"
    if influencer.logistics.tracking_number:
        values["[Tracking]"] = influencer.logistics.tracking_number
    if brand:
        values["[Brand Name]"] = brand

    rendered = body
    for placeholder, value in values.items():
        rendered = rendered.replace(placeholder, value)
    return rendered
