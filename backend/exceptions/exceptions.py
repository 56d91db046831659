# @role: Custom exception classes for the trading simulator
# @used_by: ledger.py, trading_session.py, advisor_service.py, portfolio_router.py, market_router.py
# @filter_type: utility
# @tags: exceptions, error, base
class TradeRejectedException(Exception):
    """Base class for ledger validation failures. Nothing is applied when raised."""
    pass

class InsufficientFundsException(TradeRejectedException):
    """Raised when a buy costs more than the available cash balance."""
    pass

class InsufficientSharesException(TradeRejectedException):
    """Raised when a sell asks for more shares than the holding has."""
    pass

class UnknownSymbolException(Exception):
    """Raised when a lookup references a symbol absent from the market."""
    pass

class RemoteServiceException(Exception):
    """Raised when the AI service fails or returns unparseable data."""
    pass
