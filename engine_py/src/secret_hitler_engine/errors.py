# engine_py/src/secret_hitler_engine/errors.py

class GameError(Exception):
    """Base exception for rule violations. Never leaves the engine."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")

# Specific error codes
NOT_FOUND = "NOT_FOUND"
UNAUTHORIZED = "UNAUTHORIZED"
INVALID_CHOICE = "INVALID_CHOICE"
ILLEGAL_STATE = "ILLEGAL_STATE"
EXHAUSTED = "EXHAUSTED"

# Lobby codes
ROOM_FULL = "ROOM_FULL"
NAME_TAKEN = "NAME_TAKEN"

# Helper functions to raise common errors
def raise_error(code: str, message: str):
    raise GameError(code, message)

def not_found(message: str):
    raise_error(NOT_FOUND, message)

def unauthorized(message: str):
    raise_error(UNAUTHORIZED, message)

def invalid_choice(message: str):
    raise_error(INVALID_CHOICE, message)

def illegal_state(message: str):
    raise_error(ILLEGAL_STATE, message)
