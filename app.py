###############################################################################
# app.py
###############################################################################
import os
from pulse import create_app

app = create_app()

###############################################################################
# Run the Flask App
###############################################################################
if __name__ == "__main__":
    app.run(debug=app.debug, port=int(os.getenv("PORT", 5000)))
