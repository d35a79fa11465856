"""Application constants and API enumerations"""

from enum import StrEnum


class FormatMode(StrEnum):
    """Output formats a tool response can be rendered in"""

    JSON = "json"
    CSV = "csv"


class ToolCategory(StrEnum):
    """Tool categories, used for listing and filtering"""

    GLOSSARY = "glossary"
    CLIMATE = "climate"
    ASSETS = "assets"
    COMPANIES = "companies"
    MARKETS = "markets"


# Reserved tool arguments that steer dispatch and are never sent to the API
FORMAT_ARGUMENT = "response_format"
FETCH_ALL_ARGUMENT = "fetch_all"

# Pagination wire names
CURSOR_PARAM = "cursor"
RESULTS_KEY = "results"
PAGINATION_KEY = "pagination"

HTTP_SUCCESS_RANGE = range(200, 300)

RISK_FACTORS = (
    "cyclone", "fwi", "hot_days", "rx1day", "frost_days",
    "daily_freezethaw_cycles", "wind_max_daily_max", "cflood", "rflood",
    "spei", "dc", "dmc", "ffmc", "isi", "bui", "rx5day",
    "wind_max_daily_mean", "cooling_degree_days", "tg_max", "tg_mean",
    "tg_min", "tx_max", "tx_mean", "tx_min", "tn_max", "tn_mean",
    "tn_min", "sdii", "liquidprcptot", "solidprcptot", "prcptot",
    "pet", "water_budget", "dtrmax", "dtrvar", "etr", "calm_days",
    "corn_heat_units", "wbgt", "windchill", "heat_index",
    "heat_wave_frequency", "heat_wave_total_length", "heat_wave_max_length",
    "heat_wave_index", "hot_spell_frequency", "hot_spell_max_length",
    "maximum_consecutive_frost_days", "cold_spell_days",
    "cold_spell_frequency", "maximum_consecutive_wet_days",
    "maximum_consecutive_dry_days", "at", "summer_days",
    "tropical_nights", "inundation", "humidex", "heating_degree_days",
    "growing_degree_days", "ice_days", "dry_days", "wet_days", "dtr",
)  # fmt: skip

PATHWAYS = (
    "SV", "historic",
    "ssp126", "ssp245", "ssp370", "ssp585", "ssp434", "ssp119", "ssp460",
    "<2 degrees", "2-3 degrees", "3-4 degrees", ">4 degrees",
)  # fmt: skip

HORIZONS = (
    "2010", "2025", "2030", "2035", "2040", "2045", "2050", "2055", "2060",
    "2065", "2070", "2075", "2080", "2085", "2090", "2095", "2100",
)  # fmt: skip

METRICS = (
    "dcr_score",
    "expected_impact",
    "cvar_95",
    "var_50",
    "var_95",
    "var_99",
    "cvar_50",
    "cvar_99",
)

STATISTICS = ("min", "max", "mean", "median", "std")
