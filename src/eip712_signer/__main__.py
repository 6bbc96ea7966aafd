"""Allow running as python -m eip712_signer."""

import sys

from eip712_signer.cli import main

sys.exit(main())
