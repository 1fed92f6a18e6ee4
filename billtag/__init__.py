"""Tags for subscription billing: descriptive tags, and control tags that
suspend invoicing, payments or overdue enforcement."""
