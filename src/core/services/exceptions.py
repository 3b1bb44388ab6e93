class ServiceError(Exception):
    _msg = "unexpected service error"

    def __init__(self, msg: str | None = None) -> None:
        self._msg = msg or self._msg
        return super().__init__()

    def __str__(self):
        return self._msg


class StoreNotReadyError(ServiceError):
    _msg = "Cart is not loaded yet. Await initialize() before mutating it"


class CartContextError(ServiceError):
    _msg = "use_cart() must be called within a provide_cart() scope"


class InvalidProductError(ServiceError):
    def __init__(self, details: str | None = None):
        msg = "Can't add product to cart: invalid product data"
        if details:
            msg += ". " + details
        super().__init__(msg)


class MalformedSnapshotError(ServiceError):
    _msg = "Stored cart snapshot is malformed"
