from typing import List, Optional

from pydantic import BaseModel, Field


class StockEntry(BaseModel):
    model_config = {"frozen": True}

    symbol: str
    name: str


class PricePoint(BaseModel):
    date: str
    price: float


class HistoryResponse(BaseModel):
    symbol: str
    data: List[PricePoint]


class NewsArticle(BaseModel):
    title: str
    url: str
    source_name: str
    published_at: Optional[str] = None

    def to_public(self) -> "ArticleOut":
        return ArticleOut(title=self.title, url=self.url, source=self.source_name, date=self.published_at)


class NewsApiSource(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None


class NewsApiArticle(BaseModel):
    model_config = {"extra": "ignore"}

    title: Optional[str] = None
    url: Optional[str] = None
    source: Optional[NewsApiSource] = None
    publishedAt: Optional[str] = None


class NewsApiResponse(BaseModel):
    model_config = {"extra": "ignore"}

    status: Optional[str] = None
    message: Optional[str] = None
    articles: Optional[List[NewsApiArticle]] = None


class AnalysisResult(BaseModel):
    analysis_text: str
    articles: List[NewsArticle] = []


class AnalyzeRequest(BaseModel):
    model_config = {"extra": "ignore"}

    symbol: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)


class ArticleOut(BaseModel):
    title: str
    url: str
    source: str
    date: Optional[str] = None


class AnalyzeResponse(BaseModel):
    analysis: str
    articles: List[ArticleOut] = []

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnalyzeResponse":
        return cls(analysis=result.analysis_text, articles=[a.to_public() for a in result.articles])


class ErrorResponse(BaseModel):
    error: str
