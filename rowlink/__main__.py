import sys

from rowlink.app import main

sys.exit(main())
