from functools import wraps
from signal_relay.tools.logger import *
from signal_relay.tools.contract_validation import validate_contract_with_error_response


def topic(name):
    """
    Decorator to register a topic handler.
    """

    def wrapper(init):
        log_info(f"Registering topic: {name}")
        return init

    return wrapper


def validate_message(contract, name):
    """
    Decorator to validate incoming event arguments against a contract schema.

    Socket.IO delivers event payloads either as a single object or as
    positional arguments. A single object is validated as-is; positional
    arguments are mapped onto the contract keys in order.

    Args:
        contract: The contract schema to validate against
        name: The topic name (used for action field in error responses)

    Returns:
        Decorator function. On failure the wrapped handler is skipped and the
        error response is returned as the event acknowledgement.
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(sid, *args):
            if len(args) == 1 and isinstance(args[0], dict):
                message = args[0]
            else:
                message = dict(zip(contract, args))

            is_valid, error_response = validate_contract_with_error_response(
                contract, message
            )
            if not is_valid:
                log_warning(f"Rejected '{name}' from {sid}: {error_response['error']}")
                error_response["action"] = name
                return error_response

            return await func(sid, message)

        return wrapper

    return decorator
