"""The password argument and the returned hash never reach the logs."""
import hashlib

from core_decorators import decorate, operation


@operation(schema={"password": str}, remove_output=True)
def hash_password(password):
    return hashlib.sha256(password.encode("utf-8")).hexdigest()[:10]


SecurityService = {"hash_password": hash_password}
decorate(SecurityService, "SecurityService")


def main() -> None:
    SecurityService["hash_password"]("secret-password")


if __name__ == "__main__":
    main()
