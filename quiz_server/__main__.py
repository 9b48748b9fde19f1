"""Run with: python -m quiz_server"""

from quiz_server.cli import main

if __name__ == "__main__":
    main()
