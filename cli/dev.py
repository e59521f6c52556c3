def main() -> None:
    """Run development server."""
    from wallet_admin.main import run

    run()
