def format_weight(weight_kg: float) -> str:
    """Grams below one kilogram, kilograms with two decimals otherwise."""
    if weight_kg < 1.0:
        return f"{weight_kg * 1000:.0f} g"
    return f"{weight_kg:.2f} kg"
