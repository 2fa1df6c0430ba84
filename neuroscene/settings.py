# neuroscene/settings.py

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Cell region colours ---
SOMA_COLOR = os.getenv("NEUROSCENE_SOMA_COLOR", "0X0066FF")
AXON_COLOR = os.getenv("NEUROSCENE_AXON_COLOR", "0XFF6600")
DENDRITE_COLOR = os.getenv("NEUROSCENE_DENDRITE_COLOR", "0X99CC00")

# --- Channel density overlays ---
DENSITY_COLOR = os.getenv("NEUROSCENE_DENSITY_COLOR", "0XFF3300")
LOW_SPECTRUM_COLOR = os.getenv("NEUROSCENE_LOW_SPECTRUM_COLOR", "0XFFFF00")
HIGH_SPECTRUM_COLOR = os.getenv("NEUROSCENE_HIGH_SPECTRUM_COLOR", "0XFF0000")
DENSITY_GROUP_TYPE = "static"
LEAK_DENSITY_ID = os.getenv("NEUROSCENE_LEAK_DENSITY_ID", "Leak_all")

# Radius of the sphere drawn for components without a morphology
POINT_CELL_RADIUS = float(os.getenv("NEUROSCENE_POINT_CELL_RADIUS", "1.0"))
