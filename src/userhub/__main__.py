"""Entry point for 'python -m userhub' command."""

from userhub.cli import main

if __name__ == "__main__":
    main()
