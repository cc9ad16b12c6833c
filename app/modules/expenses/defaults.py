# Categorías creadas para cada usuario la primera vez que lista sus categorías
DEFAULT_CATEGORIES = [
    ("Office Supplies", "#3B82F6"),
    ("Travel & Transportation", "#10B981"),
    ("Meals & Entertainment", "#F59E0B"),
    ("Software & Subscriptions", "#8B5CF6"),
    ("Marketing & Advertising", "#EF4444"),
    ("Equipment & Hardware", "#6B7280"),
    ("Professional Services", "#EC4899"),
    ("Utilities & Internet", "#14B8A6"),
    ("Other", "#64748B"),
]
