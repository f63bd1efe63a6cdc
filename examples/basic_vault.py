"""
Basic Vault Example - Local registration, field encryption and re-login.
"""

import logging
import tempfile

from locker_auth import AuthStateController, VaultConfig, build_client
from locker_auth.passwords import PasswordConfig, PasswordGenerator


def main():
    logging.basicConfig(level=logging.INFO)

    # Initialize client on a throwaway data directory
    data_dir = tempfile.mkdtemp(prefix="locker-")
    client = build_client(VaultConfig(backend="file", data_dir=data_dir))
    controller = AuthStateController(client)
    controller.initialize()
    print(f"Initial state: {controller.state.status.value}")

    # Register (also logs in)
    state = controller.register("alice@example.com", "Secr3t!")
    print(f"\nRegistered: {state.user.name} ({state.user.provider.value})")

    # Protect an entry's secret fields
    generated = PasswordGenerator.generate_password(PasswordConfig(length=20))
    report = PasswordGenerator.calculate_strength(generated)
    entry = {"id": "entry-1", "title": "Bank", "password": generated, "notes": "PIN 0000"}
    sealed = client.engine.encrypt_fields(entry, ["password", "notes"])
    print(f"Generated password strength: {report.strength} ({report.score})")
    print(f"Sealed password: {sealed['password'][:32]}...")

    # Logout wipes the key
    controller.sign_out()
    print(f"\nLogged out, key installed: {client.engine.get_key() is not None}")

    # Wrong password
    state = controller.login("alice@example.com", "wrong")
    print(f"Bad login: {state.error}")

    # Correct password re-derives the same key
    controller.login("alice@example.com", "Secr3t!")
    opened = client.engine.decrypt_fields(sealed, ["password", "notes"])
    print(f"\nDecrypted after re-login: {opened['password'] == generated}")

    # A new process restores the user, but not the key
    restarted = build_client(VaultConfig(backend="file", data_dir=data_dir))
    user = restarted.restore()
    print(f"\nRestored user: {user.email if user else None}")
    print(f"Restored session has key: {restarted.current_session() is not None}")


if __name__ == "__main__":
    main()
