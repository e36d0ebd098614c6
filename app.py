from flask import Flask, render_template, request, jsonify, session, g, stream_template
from dotenv import load_dotenv
import logging
import os
from pathlib import Path

from session.context import UserDataContext
from userdata.hooks import install_user_variables_hook
from userdata.page import Page
from userdata.policy import QueryOverridePolicy
from userdata.storage import SessionStore, DEFAULT_STORAGE_KEY


# -------------------------------------------------
# Setup
# -------------------------------------------------

load_dotenv()
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ROOT_DIR = Path(__file__).resolve().parent

app = Flask(
    __name__,
    template_folder=str(ROOT_DIR / "templates"),
)
app.secret_key = os.getenv("FLASK_SECRET_KEY", "dev-secret")

app.config["USER_DATA_STORAGE_KEY"] = os.getenv("USER_DATA_STORAGE_KEY", DEFAULT_STORAGE_KEY)
app.config["USER_DATA_QUERY_POLICY"] = QueryOverridePolicy.parse(
    os.getenv("USER_DATA_QUERY_POLICY", QueryOverridePolicy.REPLACE.value)
)


# -------------------------------------------------
# Helpers: user data context per page
# -------------------------------------------------

def get_store():
    return SessionStore(session, key=app.config["USER_DATA_STORAGE_KEY"])


def get_user_data():
    if "user_data" not in g:
        g.user_data = UserDataContext.load(
            query=request.args,
            store=get_store(),
            policy=app.config["USER_DATA_QUERY_POLICY"],
        )
    return g.user_data


def is_html_response(response) -> bool:
    return response.mimetype == "text/html" and not response.direct_passthrough


def stream_through(page, chunks):
    """Buffer a streamed body; propagation fires once the last chunk is in."""
    for chunk in chunks:
        page.feed(chunk)
    page.close()
    yield page.render()


@app.before_request
def acquire_user_data():
    if request.endpoint == "static":
        return
    get_user_data()


@app.after_request
def propagate_user_data(response):
    ctx = g.get("user_data")
    if ctx is None or not is_html_response(response):
        return response

    page = Page()
    install_user_variables_hook(page)

    if response.is_streamed:
        ctx.attach(page)
        response.response = stream_through(page, response.response)
        response.headers.pop("Content-Length", None)
        return response

    page.feed(response.get_data(as_text=True))
    page.close()
    ctx.attach(page)
    response.set_data(page.render())
    return response


@app.context_processor
def inject_user_data():
    ctx = get_user_data()
    return {"user_data": ctx}


# -------------------------------------------------
# Funnel pages
# -------------------------------------------------

@app.route("/")
def index():
    return render_template("index.html")


@app.route("/pix", methods=["GET", "POST"])
def pix():
    if request.method == "POST":
        key = request.form.get("chavePix", "").strip()
        if key:
            get_user_data().save({"chavePix": key})
    return render_template("pix.html")


@app.route("/revisao")
def revisao():
    return render_template("revisao.html")


@app.route("/finalizar")
def finalizar():
    # legacy markup without data-* markers, streamed
    return stream_template("finalizar.html")


@app.route("/comprovante")
def comprovante():
    return render_template("comprovante.html")


# -------------------------------------------------
# API
# -------------------------------------------------

def user_data_payload(ctx):
    return {
        "data": ctx.get_user_data(),
        "name": ctx.get_user_name(),
        "full_name": ctx.get_user_full_name(),
        "cpf": ctx.get_user_cpf(),
        "birth_date": ctx.get_user_birth_date(),
        "mother_name": ctx.get_user_mother_name(),
        "marital_status": ctx.get_user_marital_status(),
    }


@app.route("/api/user-data", methods=["GET"])
def get_user_data_api():
    return jsonify(user_data_payload(get_user_data()))


@app.route("/api/user-data", methods=["POST"])
def save_user_data_api():
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        return jsonify({"error": "Expected a non-empty JSON object"}), 400

    ctx = get_user_data()
    ctx.save(data)
    return jsonify({"status": "saved", **user_data_payload(ctx)})


@app.route("/api/user-data", methods=["DELETE"])
def clear_user_data_api():
    get_user_data().clear()
    return jsonify({"status": "cleared"})


if __name__ == "__main__":
    app.run(debug=True)
