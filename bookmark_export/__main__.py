import sys

from bookmark_export.cli import main

sys.exit(main())
