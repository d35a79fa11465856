"""
Catalog of CDT Express endpoints exposed as tools.

Each entry pairs an input schema with a URL template relative to the API
base URL. Endpoints marked paginated answer with a `pagination` cursor block
and accept the `fetch_all` control argument.
"""

from common.logging import get_logger

from cdt_express.core.constants import ToolCategory
from cdt_express.dispatch.pagination import PageFetcher
from cdt_express.dispatch.template import UrlTemplate
from cdt_express.schemas import catalog
from cdt_express.schemas.fields import FieldSchema
from cdt_express.tools.endpoint_tool import EndpointDefinition, EndpointTool
from cdt_express.tools.glossary_tool import MetricsDefinitionTool
from cdt_express.tools.registry import ToolRegistry

logger = get_logger(__name__)


def _endpoint(
    name: str,
    title: str,
    description: str,
    category: ToolCategory,
    schema: FieldSchema,
    template: str,
    paginated: bool = False,
) -> EndpointDefinition:
    return EndpointDefinition(
        name=name,
        title=title,
        description=description,
        category=category,
        schema=schema,
        template=UrlTemplate(template),
        paginated=paginated,
    )


CLIMATE_ENDPOINTS = (
    _endpoint(
        "get_climate_metrics_exposure",
        "Get exposure metrics for a location",
        "Returns exposure statistics, percentiles, and return periods.",
        ToolCategory.CLIMATE,
        catalog.METRICS_SCHEMA,
        "/v4/climate/metrics/exposure",
    ),
    _endpoint(
        "get_climate_metrics_impact",
        "Get impact metrics for a location",
        "Returns impact statistics based on asset damage calculations.",
        ToolCategory.CLIMATE,
        catalog.METRICS_SCHEMA,
        "/v4/climate/metrics/impact",
    ),
    _endpoint(
        "get_climate_metrics_probability_adjusted_impact",
        "Get probability-adjusted impact metrics",
        "Returns impact metrics with probability-adjusted return periods.",
        ToolCategory.CLIMATE,
        catalog.METRICS_SCHEMA,
        "/v4/climate/metrics/probability_adjusted_impact",
    ),
    _endpoint(
        "get_climate_distribution_exposure",
        "Get exposure distribution for a location",
        "Returns the full exposure distribution (quantile values) for a single risk factor.",
        ToolCategory.CLIMATE,
        catalog.DISTRIBUTION_SCHEMA,
        "/v4/climate/distribution/exposure",
    ),
    _endpoint(
        "get_climate_distribution_impact",
        "Get impact distribution for a location",
        "Returns the full impact distribution (quantile values) for a single risk factor.",
        ToolCategory.CLIMATE,
        catalog.DISTRIBUTION_SCHEMA,
        "/v4/climate/distribution/impact",
    ),
)

ASSET_ENDPOINTS = (
    _endpoint(
        "list_assets",
        "List physical assets",
        "Paginate through physical asset data with optional filters for country and asset type.",
        ToolCategory.ASSETS,
        catalog.LIST_ASSETS_SCHEMA,
        "/v3/assets",
        paginated=True,
    ),
    _endpoint(
        "get_asset",
        "Get asset details",
        "Retrieve details for a specific physical asset by ID.",
        ToolCategory.ASSETS,
        catalog.ASSET_ID_SCHEMA,
        "/v3/assets/{asset_id}",
    ),
    _endpoint(
        "search_assets",
        "Search assets",
        "Search for assets by name/address within a specific scope "
        "(public, organization, or company).",
        ToolCategory.ASSETS,
        catalog.SEARCH_ASSETS_SCHEMA,
        "/v3/assets/search",
    ),
    _endpoint(
        "get_asset_climate_scores",
        "Get asset climate risk scores",
        "Retrieve physical risk analytics (scores) for a specific asset.",
        ToolCategory.ASSETS,
        catalog.ASSET_SCORES_SCHEMA,
        "/v3/assets/{asset_id}/climate/scores",
    ),
)

COMPANY_ENDPOINTS = (
    _endpoint(
        "list_companies",
        "List companies",
        "Paginate through all public or organization-specific companies.",
        ToolCategory.COMPANIES,
        catalog.LIST_COMPANIES_SCHEMA,
        "/v3/companies",
        paginated=True,
    ),
    _endpoint(
        "search_companies",
        "Search companies",
        "Search for companies by name, ISIN, ticker, or sector.",
        ToolCategory.COMPANIES,
        catalog.SEARCH_COMPANIES_SCHEMA,
        "/v3/companies/search",
    ),
    _endpoint(
        "get_company",
        "Get company details",
        "Retrieve details for a specific company by ID.",
        ToolCategory.COMPANIES,
        catalog.COMPANY_ID_SCHEMA,
        "/v3/companies/{company_id}",
    ),
    _endpoint(
        "get_company_climate_scores",
        "Get company climate scores",
        "Get aggregated physical risk analytics for a company.",
        ToolCategory.COMPANIES,
        catalog.COMPANY_SCORES_SCHEMA,
        "/v3/companies/{company_id}/climate/scores",
    ),
    _endpoint(
        "get_company_assets",
        "Get company assets",
        "Paginate through physical assets owned by a specific company.",
        ToolCategory.COMPANIES,
        catalog.COMPANY_ASSETS_SCHEMA,
        "/v3/companies/{company_id}/assets",
        paginated=True,
    ),
    _endpoint(
        "get_company_subsidiaries",
        "Get company subsidiaries",
        "Retrieve list of subsidiaries for a company.",
        ToolCategory.COMPANIES,
        catalog.COMPANY_ID_SCHEMA,
        "/v3/companies/{company_id}/subsidiaries",
    ),
    _endpoint(
        "get_company_geo_clusters",
        "Get company geo clusters",
        "Get clustered asset locations for geospatial mapping at a specific zoom level.",
        ToolCategory.COMPANIES,
        catalog.COMPANY_CLUSTERS_SCHEMA,
        "/v3/companies/{company_id}/geo/clusters",
    ),
)

MARKET_ENDPOINTS = (
    _endpoint(
        "list_market_groups",
        "List market groups",
        "Paginate through market index groups.",
        ToolCategory.MARKETS,
        catalog.PAGINATION_SCHEMA,
        "/v3/markets/groups",
        paginated=True,
    ),
    _endpoint(
        "get_market_group",
        "Get market group",
        "Get details of a specific market index group.",
        ToolCategory.MARKETS,
        catalog.GROUP_ID_SCHEMA,
        "/v3/markets/groups/{group_id}",
    ),
    _endpoint(
        "search_market_groups",
        "Search market groups",
        "Search for market index groups by name.",
        ToolCategory.MARKETS,
        catalog.SEARCH_MARKET_GROUPS_SCHEMA,
        "/v3/markets/groups/search",
    ),
    _endpoint(
        "list_market_group_constituents",
        "List market group constituents",
        "Get the list of market indexes that belong to a specific group.",
        ToolCategory.MARKETS,
        catalog.LIST_GROUP_CONSTITUENTS_SCHEMA,
        "/v3/markets/groups/{group_id}/constituents",
        paginated=True,
    ),
    _endpoint(
        "list_market_indexes",
        "List market indexes",
        "Paginate through all market indexes.",
        ToolCategory.MARKETS,
        catalog.PAGINATION_SCHEMA,
        "/v3/markets/indexes",
        paginated=True,
    ),
    _endpoint(
        "get_market_index",
        "Get market index",
        "Get details of a specific market index.",
        ToolCategory.MARKETS,
        catalog.INDEX_ID_SCHEMA,
        "/v3/markets/indexes/{index_id}",
    ),
    _endpoint(
        "search_market_indexes",
        "Search market indexes",
        "Search for market indexes by name.",
        ToolCategory.MARKETS,
        catalog.SEARCH_MARKET_INDEXES_SCHEMA,
        "/v3/markets/indexes/search",
    ),
    _endpoint(
        "list_market_index_companies",
        "List market index companies",
        "Paginate through companies within a specific market index.",
        ToolCategory.MARKETS,
        catalog.INDEX_COMPANIES_SCHEMA,
        "/v3/markets/indexes/{index_id}/companies",
        paginated=True,
    ),
    _endpoint(
        "list_market_index_assets",
        "List market index assets",
        "Paginate through physical assets owned by companies in a market index.",
        ToolCategory.MARKETS,
        catalog.INDEX_ASSETS_SCHEMA,
        "/v3/markets/indexes/{index_id}/assets",
        paginated=True,
    ),
    _endpoint(
        "get_market_index_climate_scores",
        "Get market index climate scores",
        "Get the aggregated physical risk score for the entire market index.",
        ToolCategory.MARKETS,
        catalog.INDEX_SCORES_SCHEMA,
        "/v3/markets/indexes/{index_id}/climate/scores",
    ),
    _endpoint(
        "get_market_index_companies_climate_scores",
        "Get market index companies climate scores",
        "Get physical risk scores for each company within the market index.",
        ToolCategory.MARKETS,
        catalog.INDEX_COMPANIES_SCORES_SCHEMA,
        "/v3/markets/indexes/{index_id}/companies/climate/scores",
        paginated=True,
    ),
    _endpoint(
        "get_market_index_assets_climate_scores",
        "Get market index assets climate scores",
        "Get physical risk scores for individual assets within the market index.",
        ToolCategory.MARKETS,
        catalog.INDEX_ASSETS_SCORES_SCHEMA,
        "/v3/markets/indexes/{index_id}/assets/climate/scores",
        paginated=True,
    ),
    _endpoint(
        "get_market_index_geo_clusters",
        "Get market index geo clusters",
        "Get clustered asset locations for the market index for geospatial mapping.",
        ToolCategory.MARKETS,
        catalog.INDEX_CLUSTERS_SCHEMA,
        "/v3/markets/indexes/{index_id}/geo/clusters",
    ),
)

ENDPOINTS: tuple[EndpointDefinition, ...] = (
    *CLIMATE_ENDPOINTS,
    *ASSET_ENDPOINTS,
    *COMPANY_ENDPOINTS,
    *MARKET_ENDPOINTS,
)


def build_tool_registry(
    fetcher: PageFetcher,
    max_pages: int | None = None,
    endpoints: tuple[EndpointDefinition, ...] = ENDPOINTS,
) -> ToolRegistry:
    """
    Build the registry of every tool the server exposes.

    Every URL template is checked against its schema first, so a placeholder
    that could go unfilled stops startup instead of surfacing per call.

    Raises:
        ConfigurationError: If a template does not fit its schema
    """
    for definition in endpoints:
        definition.template.check_schema(definition.schema)

    registry = ToolRegistry()
    registry.register(MetricsDefinitionTool())
    for definition in endpoints:
        registry.register(EndpointTool(definition, fetcher, max_pages=max_pages))

    logger.info("tool_registry_built", **registry.get_registry_stats(), max_pages=max_pages)
    return registry
