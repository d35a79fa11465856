from cdt_express.clients.cdt_client import CDTExpressClient

__all__ = ["CDTExpressClient"]
