"""
Input schemas for every CDT Express endpoint.

Schemas are composed from reusable building blocks with FieldSchema.extend,
in the same order the API documents its parameters.
"""

from cdt_express.core.constants import HORIZONS, METRICS, PATHWAYS, RISK_FACTORS, STATISTICS
from cdt_express.schemas.fields import (
    ArrayField,
    AtLeastOneOf,
    EnumField,
    FieldSchema,
    NumberField,
    RequiredWhen,
    StringField,
)

# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------

PAGINATION_SCHEMA = FieldSchema(
    properties={
        "cursor": StringField(description="Pagination cursor"),
        "limit": NumberField(minimum=1, maximum=100, description="Number of results (1-100)"),
    }
)

GEO_POINT_SCHEMA = FieldSchema(
    properties={
        "latitude": NumberField(minimum=-90, maximum=90, required=True, description="Latitude"),
        "longitude": NumberField(minimum=-180, maximum=180, required=True, description="Longitude"),
    }
)

ENTITY_FILTER_SCHEMA = FieldSchema(
    properties={
        "country": StringField(length=3, description="ISO 3166-1 alpha-3 country code"),
        "state": StringField(description="State or region"),
        "asset_type": StringField(description="Physical asset type"),
        "sector": StringField(description="GICS sector"),
    }
)

CLIMATE_PARAMS_SCHEMA = FieldSchema(
    properties={
        "risk": EnumField(members=("physical", "transition"), default="physical"),
        "pathway": EnumField(
            members=PATHWAYS, description="Climate pathway (e.g. 'ssp245', '<2 degrees')"
        ),
        "horizon": EnumField(members=HORIZONS, description="Horizon year (e.g. 2030, 2050)"),
        "metric": ArrayField(
            items=EnumField(members=METRICS),
            default=(METRICS[0],),
            description=(
                "Metrics to include in the response. For definitions, refer to resource: "
                "file:///glossary/metrics.txt"
            ),
        ),
    }
)

CLUSTER_PARAMS_SCHEMA = FieldSchema(
    properties={
        "zoom": NumberField(
            minimum=0, maximum=22, integer=True, required=True, description="Map zoom level (0-22)"
        ),
        "bbox": StringField(description="Bounding box: 'min_lon,min_lat,max_lon,max_lat'"),
        "radius": StringField(description="Cluster radius"),
    }
)

RISK_RANGE_SCHEMA = FieldSchema(
    properties={
        "min_risk": NumberField(description="Lower bound on the sorted risk metric"),
        "max_risk": NumberField(description="Upper bound on the sorted risk metric"),
    }
)


def sort_schema(*allowed_fields: str) -> FieldSchema:
    """Sorting parameters restricted to the given fields."""
    return FieldSchema(
        properties={
            "sort_by": EnumField(members=allowed_fields),
            "sort_direction": EnumField(members=("ascending", "descending"), default="descending"),
        }
    )


def _id_schema(name: str, description: str) -> FieldSchema:
    return FieldSchema(
        properties={name: StringField(format="uuid", required=True, description=description)}
    )


def _name_search_schema() -> FieldSchema:
    return FieldSchema(
        properties={
            "limit": NumberField(minimum=1, maximum=100, description="Number of results (1-100)"),
            "name": StringField(description="Name to search for"),
        }
    )


ASSET_ID_SCHEMA = _id_schema("asset_id", "Unique Asset UUID")
COMPANY_ID_SCHEMA = _id_schema("company_id", "Unique Company UUID")
GROUP_ID_SCHEMA = _id_schema("group_id", "Market Index Group UUID")
INDEX_ID_SCHEMA = _id_schema("index_id", "Market Index UUID")

# ---------------------------------------------------------------------------
# Climate Metrics API
# ---------------------------------------------------------------------------

METRICS_SCHEMA = GEO_POINT_SCHEMA.extend(
    {
        "risk_factors": ArrayField(
            items=EnumField(members=RISK_FACTORS), description="Risk factors (e.g. 'fwi')"
        ),
        "pathway": ArrayField(
            items=EnumField(members=PATHWAYS),
            description="Climate pathways (e.g. 'ssp245'). REQUIRED if 'horizon' is not provided.",
        ),
        "horizon": ArrayField(
            items=EnumField(members=HORIZONS),
            description="Horizon years (e.g. '2050'). REQUIRED if 'pathway' is not provided.",
        ),
        "percentiles": ArrayField(
            items=NumberField(minimum=1, maximum=100), description="Defaults: 50, 75, 90, 95, 99"
        ),
        "statistics": ArrayField(
            items=EnumField(members=STATISTICS), description="Defaults: min, max, mean"
        ),
        "return_periods": ArrayField(
            items=NumberField(minimum=1, maximum=1000), description="Defaults: 2, 5, 10, 20, 100"
        ),
    }
).with_rules(AtLeastOneOf(field_names=("pathway", "horizon")))

DISTRIBUTION_SCHEMA = GEO_POINT_SCHEMA.extend(
    {
        "risk_factor": EnumField(members=RISK_FACTORS, required=True),
        "pathway": EnumField(members=PATHWAYS, required=True),
        "horizon": EnumField(members=HORIZONS, required=True),
    }
)

# ---------------------------------------------------------------------------
# Physical Assets API
# ---------------------------------------------------------------------------

LIST_ASSETS_SCHEMA = PAGINATION_SCHEMA.extend(ENTITY_FILTER_SCHEMA)

SEARCH_ASSETS_SCHEMA = FieldSchema(
    properties={
        "scope": EnumField(members=("public", "organization", "company")),
        "company_id": StringField(format="uuid", description="Required when scope is 'company'"),
        "query": StringField(description="Search term for name or address"),
    }
).with_rules(RequiredWhen(field_name="company_id", when_field="scope", equals="company"))

ASSET_SCORES_SCHEMA = ASSET_ID_SCHEMA.extend(CLIMATE_PARAMS_SCHEMA)

# ---------------------------------------------------------------------------
# Companies API
# ---------------------------------------------------------------------------

LIST_COMPANIES_SCHEMA = PAGINATION_SCHEMA.extend(
    sort_schema("created_at", "name", "sector"),
    {"scope": EnumField(members=("public", "organization"))},
)

SEARCH_COMPANIES_SCHEMA = FieldSchema(
    properties={
        "limit": NumberField(minimum=1, maximum=100, description="Number of results (1-100)"),
        "name": StringField(description="Company name"),
        "isin_code": StringField(description="ISIN code"),
        "stock_ticker": StringField(description="Stock ticker symbol"),
        "sector": StringField(description="GICS sector"),
        "method": EnumField(members=("fuzzy", "strict"), default="strict"),
    }
)

COMPANY_SCORES_SCHEMA = COMPANY_ID_SCHEMA.extend(CLIMATE_PARAMS_SCHEMA, ENTITY_FILTER_SCHEMA)

COMPANY_ASSETS_SCHEMA = COMPANY_ID_SCHEMA.extend(
    PAGINATION_SCHEMA,
    ENTITY_FILTER_SCHEMA,
    sort_schema("asset_type", "country", "state", "address", "city", "latitude", "longitude"),
)

COMPANY_CLUSTERS_SCHEMA = COMPANY_ID_SCHEMA.extend(CLUSTER_PARAMS_SCHEMA, ENTITY_FILTER_SCHEMA)

# ---------------------------------------------------------------------------
# Markets/Indices API
# ---------------------------------------------------------------------------

SEARCH_MARKET_GROUPS_SCHEMA = _name_search_schema()

LIST_GROUP_CONSTITUENTS_SCHEMA = GROUP_ID_SCHEMA.extend(PAGINATION_SCHEMA)

SEARCH_MARKET_INDEXES_SCHEMA = _name_search_schema()

INDEX_COMPANIES_SCHEMA = INDEX_ID_SCHEMA.extend(
    PAGINATION_SCHEMA,
    sort_schema("company_name", "sector"),
    {"sector": StringField(description="GICS sector")},
)

INDEX_ASSETS_SCHEMA = INDEX_ID_SCHEMA.extend(
    PAGINATION_SCHEMA,
    ENTITY_FILTER_SCHEMA,
    sort_schema("asset_type", "country", "state"),
)

INDEX_SCORES_SCHEMA = INDEX_ID_SCHEMA.extend(CLIMATE_PARAMS_SCHEMA, ENTITY_FILTER_SCHEMA)

INDEX_COMPANIES_SCORES_SCHEMA = INDEX_SCORES_SCHEMA.extend(
    PAGINATION_SCHEMA,
    sort_schema("id", "asset_count", "sector", "company_name", *METRICS),
    RISK_RANGE_SCHEMA,
)

INDEX_ASSETS_SCORES_SCHEMA = INDEX_SCORES_SCHEMA.extend(
    PAGINATION_SCHEMA,
    sort_schema("id", "asset_type", "country", "state", *METRICS),
    RISK_RANGE_SCHEMA,
)

INDEX_CLUSTERS_SCHEMA = INDEX_ID_SCHEMA.extend(CLUSTER_PARAMS_SCHEMA, ENTITY_FILTER_SCHEMA)
