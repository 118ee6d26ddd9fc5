"""
Gray-Scott Parameter Presets

Each preset is a (DA, DB, F, K) combination known to produce a
recognizable pattern with the 9-point stencil at dt = 1. "default" is the
classic DA=1, DB=0.5, F=0.055, K=0.062 setup (coral-like growth).

F/K values follow the usual Pearson classification as charted by
Karl Sims and Robert Munafo (mrob.com/pub/comp/xmorphia).
"""

PRESETS = {
    "default": {
        "name": "Classic",
        "description": "Coral-like fingers spreading from the seed blocks",
        "DA": 1.0, "DB": 0.5, "F": 0.055, "K": 0.062,
    },
    "mitosis": {
        "name": "Mitosis",
        "description": "Spots that grow and divide like cells",
        "DA": 1.0, "DB": 0.5, "F": 0.0367, "K": 0.0649,
    },
    "coral": {
        "name": "Coral",
        "description": "Dense branching growth",
        "DA": 1.0, "DB": 0.5, "F": 0.0545, "K": 0.062,
    },
    "spots": {
        "name": "Spots",
        "description": "Stable field of isolated spots",
        "DA": 1.0, "DB": 0.5, "F": 0.035, "K": 0.065,
    },
    "maze": {
        "name": "Maze",
        "description": "Winding labyrinth stripes",
        "DA": 1.0, "DB": 0.5, "F": 0.029, "K": 0.057,
    },
    "waves": {
        "name": "Waves",
        "description": "Chaotic travelling waves",
        "DA": 1.0, "DB": 0.5, "F": 0.014, "K": 0.045,
    },
    "solitons": {
        "name": "Solitons",
        "description": "Lone spots that drift without dividing",
        "DA": 1.0, "DB": 0.5, "F": 0.03, "K": 0.062,
    },
}

PRESET_ORDER = [
    "default", "mitosis", "coral", "spots", "maze", "waves", "solitons",
]

# Slider ranges for the control panel. dt has no slider.
SLIDER_DEFS = [
    {"key": "DA", "label": "DA", "section": "DIFFUSION",
     "min": 0.0, "max": 1.0, "default": 1.0, "fmt": ".3f", "step": 0.001},
    {"key": "DB", "label": "DB", "section": "DIFFUSION",
     "min": 0.0, "max": 1.0, "default": 0.5, "fmt": ".3f", "step": 0.001},
    {"key": "F", "label": "f", "section": "REACTION",
     "min": 0.002, "max": 0.12, "default": 0.055, "fmt": ".3f", "step": 0.001},
    {"key": "K", "label": "k", "section": "REACTION",
     "min": 0.01, "max": 0.07, "default": 0.062, "fmt": ".3f", "step": 0.001},
]


def get_preset(name):
    """Get a preset by name. Returns None if not found."""
    return PRESETS.get(name)


def list_presets():
    """Return list of (key, name, description) in display order."""
    return [(k, PRESETS[k]["name"], PRESETS[k]["description"])
            for k in PRESET_ORDER if k in PRESETS]
