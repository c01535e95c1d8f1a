"""
Demand forecasting for analysed items.

Each item's forecast comes from the text-generation oracle when it answers
with a valid forecast, and from the item's historical monthly velocity
otherwise. Items are forecast concurrently and independently: one item's
oracle failure never affects another item.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from agents.prompts import DEMAND_FORECAST_SCHEMA, build_demand_forecast_prompt
from config.config import InventoryIntelligenceConfig
from connectors.text_oracle import OracleUnavailable, TextOracle
from models.enums import DemandVariability, ForecastSource
from models.intelligence import DemandForecast, ItemPerformanceAnalysis
from models.inventory import BusinessContext

logger = logging.getLogger(__name__)

FALLBACK_CONFIDENCE_LEVEL = 60.0
FALLBACK_REASONING = "Based on historical average due to AI unavailability"


class OracleForecast(BaseModel):
    """The forecast fields of an oracle response, validated against the forecast schema."""

    model_config = ConfigDict(allow_inf_nan=False)

    next_30_days_demand: float = Field(
        ge=0, strict=True, validation_alias=AliasChoices("next30DaysDemand", "next_30_days_demand")
    )
    next_60_days_demand: float = Field(
        ge=0, strict=True, validation_alias=AliasChoices("next60DaysDemand", "next_60_days_demand")
    )
    next_90_days_demand: float = Field(
        ge=0, strict=True, validation_alias=AliasChoices("next90DaysDemand", "next_90_days_demand")
    )
    seasonal_adjustment: float = Field(
        ge=0, strict=True, validation_alias=AliasChoices("seasonalAdjustment", "seasonal_adjustment")
    )
    confidence_level: float = Field(
        ge=0, le=100, strict=True, validation_alias=AliasChoices("confidenceLevel", "confidence_level")
    )
    demand_variability: DemandVariability = Field(
        validation_alias=AliasChoices("demandVariability", "demand_variability")
    )
    forecast_reasoning: str = Field(
        strict=True, validation_alias=AliasChoices("forecastReasoning", "forecast_reasoning")
    )

    @field_validator("demand_variability", mode="before")
    @classmethod
    def _normalise_variability(cls, value):
        # Unknown labels are read as medium, the same weight the optimizer gives them
        if isinstance(value, str):
            label = value.strip().lower()
            if label in {v.value for v in DemandVariability}:
                return label
            logger.debug(f"Unrecognised demand variability '{value}', using medium")
            return DemandVariability.MEDIUM
        return value


def parse_oracle_forecast(payload: dict) -> OracleForecast | OracleUnavailable:
    """Validate an oracle payload, reporting a schema violation as unavailability."""
    try:
        return OracleForecast.model_validate(payload)
    except ValidationError as exc:
        return OracleUnavailable(f"Response did not match the forecast schema: {exc.error_count()} error(s)")


def fallback_forecast(
    analysis: ItemPerformanceAnalysis,
    forecast_date: datetime,
    confidence_level: float = FALLBACK_CONFIDENCE_LEVEL,
) -> DemandForecast:
    """Historical-average forecast used whenever the oracle cannot answer."""
    monthly_demand = analysis.monthly_velocity or 0.0
    return DemandForecast(
        **dict(analysis),
        next_30_days_demand=monthly_demand,
        next_60_days_demand=monthly_demand * 2,
        next_90_days_demand=monthly_demand * 3,
        seasonal_adjustment=1.0,
        confidence_level=confidence_level,
        demand_variability=DemandVariability.MEDIUM,
        forecast_reasoning=FALLBACK_REASONING,
        forecast_date=forecast_date,
        forecast_source=ForecastSource.FALLBACK,
    )


class DemandForecaster:
    """
    Requests 30/60/90-day demand forecasts from a text oracle, one call per item.

    Args:
        oracle: Structured text-generation oracle. None forces the fallback for every item.
        config: Pipeline configuration (item cap, concurrency, market).
        clock: Returns the timestamp stamped on each forecast.
    """

    def __init__(
        self,
        oracle: TextOracle | None,
        config: InventoryIntelligenceConfig | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.oracle = oracle
        self.config = config or InventoryIntelligenceConfig()
        self.clock = clock

    async def forecast_all(
        self,
        analyses: Sequence[ItemPerformanceAnalysis],
        context: BusinessContext | None = None,
    ) -> list[DemandForecast]:
        """Forecast the first ``forecast_item_limit`` analyses, preserving their order."""
        context = context or BusinessContext(business_sector=self.config.default_business_sector)
        selected = list(analyses)[: max(0, self.config.forecast_item_limit)]
        semaphore = asyncio.Semaphore(max(1, self.config.max_concurrent_forecasts))

        async def bounded(analysis: ItemPerformanceAnalysis) -> DemandForecast:
            async with semaphore:
                return await self.forecast(analysis, context)

        forecasts = await asyncio.gather(*(bounded(analysis) for analysis in selected))
        fallbacks = sum(1 for f in forecasts if f.forecast_source == ForecastSource.FALLBACK)
        logger.info(f"Forecast demand for {len(forecasts)} items ({fallbacks} from historical fallback)")
        return list(forecasts)

    async def forecast(self, analysis: ItemPerformanceAnalysis, context: BusinessContext) -> DemandForecast:
        """Forecast one item. Never raises: every failure yields the fallback forecast."""
        try:
            outcome = await self._request_forecast(analysis, context)
        except Exception as exc:  # noqa: BLE001
            logger.warning(f"Oracle raised while forecasting {analysis.item_name}: {exc}", exc_info=True)
            outcome = OracleUnavailable(str(exc))

        if isinstance(outcome, OracleUnavailable):
            logger.warning(f"Using historical fallback for {analysis.item_name}: {outcome.reason}")
            return fallback_forecast(analysis, self.clock(), self.config.fallback_confidence_level)

        return DemandForecast(
            **dict(analysis),
            **dict(outcome),
            forecast_date=self.clock(),
            forecast_source=ForecastSource.ORACLE,
        )

    async def _request_forecast(
        self, analysis: ItemPerformanceAnalysis, context: BusinessContext
    ) -> OracleForecast | OracleUnavailable:
        if self.oracle is None:
            return OracleUnavailable("No forecast oracle configured")

        prompt = build_demand_forecast_prompt(
            analysis,
            business_sector=context.business_sector,
            market=self.config.market,
        )
        result = await self.oracle.generate_structured(prompt, DEMAND_FORECAST_SCHEMA)
        if not result.ok:
            return result.error or OracleUnavailable("Oracle returned no value")
        return parse_oracle_forecast(result.value)
