import sys

from quotation_toolkit.cli import main

sys.exit(main())
