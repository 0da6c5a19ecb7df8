"""Static file server: serve a directory over HTTP on localhost."""

from webbed.cli import main

if __name__ == "__main__":
    main()
