# Central configuration for the dashboard.
# Adjust these settings as needed; the page reads them at startup.

from analysis.gauge import DEFAULT_SECTIONS, GAUGE_MAXIMUM

PAGE_TITLE = "Data Visualization"

# Date layout used by the dashboard JSON datasets
DATE_FORMAT = "%Y-%m-%d"

# Samples per unit of time used to label periodogram frequencies
DEFAULT_SAMPLE_RATE = 1.0

# Histogram bin slider
DEFAULT_BINS = 20
MIN_BINS = 1
MAX_BINS = 100

# Gauge (WBGT, °F)
DEFAULT_GAUGE_VALUE = 72.0
GAUGE_SECTIONS = DEFAULT_SECTIONS
GAUGE_MAX = GAUGE_MAXIMUM

# Max points drawn per line trace (downsampling for the browser)
MAX_PLOT_POINTS = 30_000

# Decimals shown in the summary statistics panel
STATS_DECIMALS = 2

# Colours
SERIES_COLORS = ("steelblue", "darkorange")
TREND_COLOR = "green"
SPECTROGRAM_COLORSCALE = "Viridis"
