import sys

from urlhealth.cli import main

sys.exit(main())
