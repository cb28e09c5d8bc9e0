import os
import sys

project_root = os.path.abspath(os.path.join(os.path.dirname(os.path.abspath(__file__)), ".."))

# allow running this file directly, not only with python -m keypadmapper
if __name__ == "__main__" and project_root not in sys.path:
    sys.path.insert(0, project_root)

from keypadmapper.main_app import main

main()
