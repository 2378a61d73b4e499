"""
HTML templates for the web interface.

Templates are stored as string constants to keep the application
self-contained. They are rendered with an autoescaping Jinja environment.
"""

from jinja2 import Environment

_ENV = Environment(autoescape=True)

UPLOAD_FORM_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Barcode Decoder</title>
    <style>
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            max-width: 640px;
            margin: 40px auto;
            padding: 0 20px;
        }

        form {
            display: flex;
            gap: 12px;
            align-items: center;
        }
    </style>
</head>
<body>
    <h1>Barcode Decoder</h1>
    <form action="/decode" method="post" enctype="multipart/form-data">
        <input type="file" name="barcode" accept="image/*" required />
        <button type="submit">Decode Barcode</button>
    </form>
    <p>Maximum upload size: {{ max_upload_mb }} MB</p>
</body>
</html>
"""

RESULT_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head><meta charset="UTF-8"><title>Barcode Decoder</title></head>
<body>
    <h1>Decoded Text:</h1>
    {% for code in codes %}
    <p><strong>{{ code.symbolType }}</strong>: {{ code.data }}</p>
    {% endfor %}
    <p><a href="/">Decode another image</a></p>
</body>
</html>
"""

ERROR_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head><meta charset="UTF-8"><title>Barcode Decoder</title></head>
<body>
    <h1>Error:</h1>
    <p>{{ error }}</p>
    {% if details %}<p>{{ details }}</p>{% endif %}
    <p><a href="/">Try again</a></p>
</body>
</html>
"""


def render(template: str, **context) -> str:
    return _ENV.from_string(template).render(**context)
