"""Entry point for ``python -m vibe_skills``."""
from vibe_skills.cli.app import main

if __name__ == "__main__":
    main()
