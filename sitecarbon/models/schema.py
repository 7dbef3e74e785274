from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class GreenHostingResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    is_green: bool = Field(False, alias="isGreen")
    hosted_by: str = Field("Unknown", alias="hostedBy")
    hosted_by_website: Optional[str] = Field(None, alias="hostedByWebsite")
    partner: bool = False
    error: Optional[str] = None


class GreenHostingReport(GreenHostingResult):
    domain: str
    message: str


class Suggestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    savings: str
    type: Literal["success", "improvement", "info"] = "info"


class LighthouseScores(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    performance: int = 0
    accessibility: int = 0
    best_practices: int = Field(0, alias="bestPractices")
    seo: int = 0


class Metrics(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    fcp: str = "N/A"
    speed_index: str = Field("N/A", alias="speedIndex")
    lcp: str = "N/A"
    tti: str = "N/A"
    total_blocking_time: str = Field("N/A", alias="totalBlockingTime")


class AnalysisResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str
    emissions: float
    data_transfer_size: Union[int, float] = Field(0, alias="dataTransferSize")
    green_hosting: GreenHostingReport = Field(alias="greenHosting")
    lighthouse_scores: LighthouseScores = Field(alias="lighthouseScores")
    metrics: Metrics
    improvements: List[Suggestion]
    timestamp: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
    url: Optional[str] = None
