# services/advisor_service.py
# @role: LLM-backed trade advice, global symbol lookup and news summaries
# @used_by: trading_session.py
# @filter_type: system
# @tags: openai, advice, news, search
from __future__ import annotations

import json
from typing import List, Optional

from openai import OpenAI
from pydantic import ValidationError

from config.env_setup import env
from config.settings import load_simulation_config
from exceptions.exceptions import RemoteServiceException
from util.portfolio_schema import AIAdvice, Holding, NewsReport, NewsSource, Stock, StockQuote
from config.logging_config import get_loggers

logger, trade_logger = get_loggers()

NEWS_FALLBACK = "Could not fetch news at this time."


def build_analysis_prompt(stocks: List[Stock], holdings: List[Holding], balance: float, count: int = 3) -> str:
    holdings_summary = ", ".join(
        f"{h.shares} shares of {h.symbol} at avg ${h.average_price:.2f}" for h in holdings
    )
    market_summary = ", ".join(
        f"{s.symbol} (${s.price:.2f}, {s.change_percent:.2f}%)" for s in stocks
    )
    return f"""
Current Portfolio Balance: ${balance:.2f}
User Holdings: {holdings_summary or 'None'}
Market Trends (US Tech and Canadian TSX): {market_summary}

Analyze the current portfolio and market trends for both US Technology and the Canadian stock market.
Suggest {count} specific trade actions (BUY/SELL/HOLD).
Consider the geographical diversification between US and Canada if applicable.
Base your logic on the trend direction and basic risk management.

Respond in JSON format like:
{{
  "advice": [
    {{"symbol": "...", "action": "BUY|SELL|HOLD", "reason": "...", "confidence": 0-100, "sentiment": "..."}}
  ]
}}
"""


class AdvisorService:
    """
    One-shot calls to the chat-completions API. Every public method degrades to
    an empty/absent result instead of raising.
    """

    def __init__(self, client: Optional[OpenAI] = None, advice_count: Optional[int] = None,
                 advisor_model: str = env.ADVISOR_MODEL, search_model: str = env.SEARCH_MODEL,
                 news_model: str = env.NEWS_MODEL):
        self._client = client
        self.advice_count = advice_count or load_simulation_config()["advice_count"]
        self.advisor_model = advisor_model
        self.search_model = search_model
        self.news_model = news_model

    @property
    def client(self) -> OpenAI:
        # Built on first use; a missing API key surfaces as a failed call
        if self._client is None:
            self._client = OpenAI(api_key=env.OPENAI_API_KEY)
        return self._client

    def _complete_json(self, model: str, prompt: str, system: str = "You are a trading assistant."):
        response = self.client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt}
            ],
            temperature=0.5,
            response_format={"type": "json_object"},
        )
        text = response.choices[0].message.content
        if not text:
            raise RemoteServiceException(f"Empty response from {model}")
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise RemoteServiceException(f"Unparseable response from {model}: {e}") from e

    def get_market_analysis(self, stocks: List[Stock], holdings: List[Holding], balance: float) -> List[AIAdvice]:
        prompt = build_analysis_prompt(stocks, holdings, balance, self.advice_count)
        try:
            payload = self._complete_json(self.advisor_model, prompt)
            items = payload.get("advice") if isinstance(payload, dict) else payload
            if not isinstance(items, list):
                raise RemoteServiceException(f"Expected an advice list, got {type(items).__name__}")
            advice = [AIAdvice.model_validate(item) for item in items][:self.advice_count]
            logger.info("🤖 Received %d advice items", len(advice))
            return advice
        except (RemoteServiceException, ValidationError) as e:
            logger.error(f"Advice response rejected: {e}")
            return []
        except Exception as e:
            logger.error(f"Advice request failed: {e}")
            return []

    def search_global_stock(self, query: str) -> Optional[Stock]:
        prompt = (
            f'Find the current stock market information for: "{query}". '
            "Return the most accurate ticker symbol, full company name, current trading price "
            "(in USD or local currency if specified), approximate market cap, and trading volume. "
            "Format the response exactly as a JSON object with properties: symbol, name, price (number), "
            "change (number), changePercent (number), marketCap (string), volume (string). "
            "If nothing matches, return an empty JSON object."
        )
        try:
            payload = self._complete_json(self.search_model, prompt)
            if not payload or not payload.get("symbol"):
                logger.info("🔍 No global match for %r", query)
                return None
            return StockQuote.model_validate(payload).to_stock()
        except (RemoteServiceException, ValidationError, AttributeError) as e:
            logger.error(f"Global search response rejected for {query!r}: {e}")
            return None
        except Exception as e:
            logger.error(f"Global search failed for {query!r}: {e}")
            return None

    def get_stock_news(self, symbol: str) -> NewsReport:
        prompt = (
            f"Search for the latest news and sentiment for stock ticker: {symbol}. "
            "If it ends in .TO, it is on the Toronto Stock Exchange. Summarize the key catalyst. "
            'Respond in JSON format like: {"summary": "...", "sources": [{"title": "...", "url": "..."}]}'
        )
        try:
            payload = self._complete_json(self.news_model, prompt)
            summary = payload.get("summary")
            if not summary:
                raise RemoteServiceException(f"No summary in news response for {symbol}")
            sources = [
                NewsSource(title=s.get("title") or "Related News", url=s.get("url") or "#")
                for s in payload.get("sources") or []
                if isinstance(s, dict)
            ]
            return NewsReport(summary=summary, sources=sources)
        except Exception as e:
            logger.error(f"News request failed for {symbol}: {e}")
            return NewsReport(summary=NEWS_FALLBACK, sources=[])
