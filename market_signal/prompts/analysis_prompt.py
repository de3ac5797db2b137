from typing import Sequence

from langchain_core.prompts import PromptTemplate

from market_signal.app.schemas import NewsArticle

DISCLAIMER_INSTRUCTION = "Important: End with a clear disclaimer that this is not financial advice."

ANALYSIS_TEMPLATE = """You are a financial analyst AI. Analyze the following recent news headlines for {name} ({symbol}):

{headlines}

Based on this, provide a concise prediction of the stock trend (Bullish/Bearish/Neutral) and a brief reasoning.
Format your response as HTML (use only <p>, <strong>, <ul> and <li>).
{disclaimer}
"""

# The disclaimer is bound up front so no caller can render the prompt without it
ANALYSIS_PROMPT = PromptTemplate.from_template(
    ANALYSIS_TEMPLATE,
    partial_variables={"disclaimer": DISCLAIMER_INSTRUCTION},
)


def render_headlines(articles: Sequence[NewsArticle]) -> str:
    # one line per article even if a title carries line breaks
    return "\n".join(f"- {' '.join(a.title.split())} ({a.source_name})" for a in articles)


def build_prompt(symbol: str, company_name: str, articles: Sequence[NewsArticle]) -> str:
    return ANALYSIS_PROMPT.format(
        name=company_name,
        symbol=symbol,
        headlines=render_headlines(articles),
    )
