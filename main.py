"""Local ChromaMix server.

Usage
-----
$ pip install -e .
$ export GEMINI_API_KEY=...        # optional; without it recipes are demo data
$ python main.py                   # starts on http://127.0.0.1:5000

Endpoints are JSON only: /wheel, /closest, /harmony, /mix, /state, /select,
/recipe, /palette, /lab, /preferences.  Set CHROMAMIX_STORE to a file path
to keep the saved palette and recipe cache between runs.
"""

from chroma_mix.app import main

if __name__ == "__main__":
    main()
