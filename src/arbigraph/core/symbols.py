"""Exchange pair symbol parsing."""
import re
from typing import Iterable, Tuple
from arbigraph.infrastructure.error_handling import InvalidSymbol

_SYMBOL_RE = re.compile(r"[A-Z]+")


class SymbolNormalizer:
    """Splits a raw pair symbol such as ``DOGEUSDT`` into (base, quote).

    Quote codes differ in length, so the split point is found by matching
    the longest configured quote currency at the end of the symbol rather
    than by slicing a fixed number of characters.
    """

    def __init__(self, quote_currencies: Iterable[str]):
        quotes = {code.strip().upper() for code in quote_currencies if code and code.strip()}
        if not quotes:
            raise ValueError("SymbolNormalizer needs at least one quote currency")
        # longest first so that e.g. BUSD wins over a shorter suffix
        self._quotes: Tuple[str, ...] = tuple(sorted(quotes, key=lambda q: (-len(q), q)))

    @property
    def quote_currencies(self) -> Tuple[str, ...]:
        return self._quotes

    def normalize(self, symbol: str) -> Tuple[str, str]:
        """Return (base, quote) or raise InvalidSymbol."""
        if not isinstance(symbol, str) or not _SYMBOL_RE.fullmatch(symbol):
            raise InvalidSymbol(f"Malformed symbol: {symbol!r}", symbol=symbol)

        for quote in self._quotes:
            if not symbol.endswith(quote):
                continue
            # only the longest matching suffix is considered
            base = symbol[:-len(quote)]
            if not base:
                raise InvalidSymbol(f"Missing base currency in {symbol}", symbol=symbol)
            if base == quote:
                raise InvalidSymbol(f"Self-pair symbol: {symbol}", symbol=symbol)
            return base, quote

        raise InvalidSymbol(f"No known quote currency in {symbol}", symbol=symbol)
