"""Key colors."""

from triggerdeck.models import Color

# Running instance
ACTIVE_COLOR = Color(r=35, g=209, b=96)

# Launchable template
READY_COLOR = Color(r=255, g=56, b=96)

# Frame around preview artwork of a launchable template
NEUTRAL_COLOR = Color(r=40, g=40, b=40)
