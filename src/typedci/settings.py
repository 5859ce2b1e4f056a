from __future__ import annotations
import os

WORKFLOW = os.environ.get("TYPEDCI_WORKFLOW")
OUTPUT = os.environ.get("TYPEDCI_OUTPUT", "-")
FORMAT = os.environ.get("TYPEDCI_FORMAT", "yaml")
DEFAULT_WORKFLOW_FILE = "typedci_workflow.py"
FORMATS = ("yaml", "json")
