"""Curated reference universe — names, sectors, descriptions, anchor prices.

No network access. Used to enrich provider and synthesized quotes and to
answer searches when no upstream search is reachable.
"""

from __future__ import annotations

from papermarket.models.reference_stock import ReferenceStock
from papermarket.models.search_result import SearchResult

DEFAULT_SECTOR = "Technology"

REFERENCE_STOCKS: tuple[ReferenceStock, ...] = (
    # Technology
    ReferenceStock("AAPL", "Apple Inc.", "Technology", "Makes iPhones, iPads, and Mac computers that kids love!"),
    ReferenceStock("MSFT", "Microsoft Corporation", "Technology", "Creates Xbox games, Windows computers, and Office!"),
    ReferenceStock("GOOGL", "Alphabet Inc.", "Technology", "The company behind Google search and YouTube!"),
    ReferenceStock("META", "Meta Platforms, Inc.", "Technology", "The company that owns Facebook, Instagram, and WhatsApp!"),
    ReferenceStock("NVDA", "NVIDIA Corporation", "Technology", "Makes powerful computer chips for gaming and AI!"),
    ReferenceStock("AMZN", "Amazon.com, Inc.", "E-commerce", "The online store where you can buy almost anything!"),
    # Automotive
    ReferenceStock("TSLA", "Tesla, Inc.", "Automotive", "Makes cool electric cars and rockets through SpaceX!"),
    ReferenceStock("F", "Ford Motor Company", "Automotive", "One of the oldest car companies in America!"),
    ReferenceStock("GM", "General Motors Company", "Automotive", "Makes Chevrolet, Cadillac, and other popular cars!"),
    # Entertainment, media, retail
    ReferenceStock("DIS", "The Walt Disney Company", "Entertainment", "Home of Mickey Mouse, Marvel heroes, and Disney movies!"),
    ReferenceStock("NFLX", "Netflix, Inc.", "Entertainment", "Your favorite streaming service for movies and shows!"),
    ReferenceStock("WMT", "Walmart Inc.", "Retail", "The biggest retail store in America!"),
    # Food & beverages
    ReferenceStock("KO", "The Coca-Cola Company", "Beverages", "Makes the world's most famous soft drinks!"),
    ReferenceStock("PEP", "PepsiCo, Inc.", "Beverages", "Makes Pepsi, Lay's chips, and Gatorade!"),
    ReferenceStock("MCD", "McDonald's Corporation", "Food Service", "The famous golden arches restaurant everyone knows!"),
    ReferenceStock("SBUX", "Starbucks Corporation", "Food Service", "The popular coffee shop chain with green logo!"),
    # Apparel
    ReferenceStock("NKE", "Nike, Inc.", "Apparel", "Makes the coolest sneakers and sports gear!"),
    # Financial
    ReferenceStock("JPM", "JPMorgan Chase & Co.", "Financial", "One of the biggest banks in America!"),
    ReferenceStock("BAC", "Bank of America Corporation", "Financial", "A major bank that helps people save money!"),
    # Healthcare
    ReferenceStock("JNJ", "Johnson & Johnson", "Healthcare", "Makes medicines and band-aids to help people feel better!"),
    ReferenceStock("PFE", "Pfizer Inc.", "Healthcare", "Creates important medicines and vaccines!"),
    # Energy
    ReferenceStock("XOM", "Exxon Mobil Corporation", "Energy", "One of the biggest oil and gas companies!"),
    # Aerospace
    ReferenceStock("BA", "The Boeing Company", "Aerospace", "Builds airplanes that fly people around the world!"),
    # Consumer goods
    ReferenceStock("PG", "Procter & Gamble Company", "Consumer Goods", "Makes everyday products like toothpaste and shampoo!"),
    ReferenceStock("UL", "Unilever PLC", "Consumer Goods", "Makes soap, ice cream, and other household products!"),
)

_BY_SYMBOL: dict[str, ReferenceStock] = {s.symbol: s for s in REFERENCE_STOCKS}

# Recent real-world closes, used to anchor synthesized quotes.
BASE_PRICES: dict[str, float] = {
    "AAPL": 229.35,
    "MSFT": 417.14,
    "GOOGL": 176.49,
    "META": 582.77,
    "NVDA": 131.60,
    "AMZN": 201.70,
    "TSLA": 251.44,
    "F": 10.62,
    "GM": 50.31,
    "DIS": 111.43,
    "NFLX": 702.15,
    "WMT": 89.72,
    "KO": 68.09,
    "PEP": 151.24,
    "MCD": 291.55,
    "SBUX": 96.83,
    "NKE": 75.18,
    "JPM": 240.62,
    "BAC": 44.07,
    "JNJ": 155.89,
    "PFE": 26.41,
    "XOM": 110.25,
    "BA": 170.04,
    "PG": 165.37,
    "UL": 60.12,
}

TRENDING_SYMBOLS: tuple[str, ...] = (
    "AAPL", "MSFT", "GOOGL", "TSLA", "DIS", "NFLX", "AMZN", "META",
)


def get_reference(symbol: str) -> ReferenceStock | None:
    return _BY_SYMBOL.get(symbol.strip().upper())


def company_name(symbol: str) -> str:
    ref = get_reference(symbol)
    if ref:
        return ref.name
    key = symbol.strip().upper()
    return f"{key} Corporation" if key else "Unknown Corporation"


def sector_for(symbol: str) -> str:
    ref = get_reference(symbol)
    return ref.sector if ref else DEFAULT_SECTOR


def describe(symbol: str) -> str:
    """Kid-friendly blurb, or a generic one naming the symbol."""
    ref = get_reference(symbol)
    if ref:
        return ref.description
    return f"A great company to learn about investing with {symbol.strip().upper()}!"


def stocks_in_sector(sector: str) -> list[ReferenceStock]:
    wanted = sector.strip().lower()
    return [s for s in REFERENCE_STOCKS if s.sector.lower() == wanted]


def to_search_result(stock: ReferenceStock, score: float = 1.0) -> SearchResult:
    return SearchResult(symbol=stock.symbol, name=stock.name, match_score=score)


def _score(stock: ReferenceStock, needle: str) -> float:
    symbol = stock.symbol.lower()
    if symbol == needle:
        return 1.0
    if symbol.startswith(needle):
        return 0.9
    if needle in symbol:
        return 0.8
    if needle in stock.name.lower():
        return 0.7
    if needle in stock.sector.lower():
        return 0.5
    if needle in stock.description.lower():
        return 0.3
    return 0.0


def search_reference(query: str, limit: int = 10) -> list[SearchResult]:
    """Case-insensitive substring search over symbol, name, sector and description.

    A blank query returns the head of the universe. Hits are ordered by
    match strength; ties keep universe order.
    """
    needle = query.strip().lower()
    if not needle:
        return [to_search_result(s) for s in REFERENCE_STOCKS[:limit]]

    scored = [(s, _score(s, needle)) for s in REFERENCE_STOCKS]
    hits = [(s, score) for s, score in scored if score > 0]
    hits.sort(key=lambda pair: pair[1], reverse=True)
    return [to_search_result(s, score) for s, score in hits[:limit]]
