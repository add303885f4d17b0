"""
Restitch - Entry point for python -m restitch
"""

if __name__ == "__main__":
    import logging

    # Avoid printing internal logging exceptions when stdout is closed by a pipe
    logging.raiseExceptions = False

    from restitch.cli import main
    main()
