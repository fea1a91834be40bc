from flask import (
    Blueprint,
    abort,
    current_app,
    flash,
    redirect,
    render_template,
    request,
    url_for,
)

from .checks import add_url, perform_check
from .errors import NotFoundError, ValidationError
from .pagination import Page

bp = Blueprint("urls", __name__)


def get_store():
    return current_app.extensions["history_store"]


@bp.route("/")
def index():
    return render_template("index.html")


@bp.post("/urls")
def create_url():
    raw_url = request.form.get("url", "")
    outcome = add_url(get_store(), raw_url)
    flash(outcome.message, outcome.category)

    if outcome.ok:
        return redirect(url_for("urls.show_url", id=outcome.url.id))

    status = 422 if isinstance(outcome.error, ValidationError) else 500
    return render_template("index.html", url=raw_url), status


@bp.route("/urls")
def list_urls():
    store = get_store()
    page = Page.from_request(
        request.args.get("page", 1),
        per_page=current_app.config["URLS_PER_PAGE"],
        total=store.count_urls(),
    )
    urls = store.list_url_summaries(limit=page.per_page, offset=page.offset)
    return render_template("urls.html", urls=urls, page=page)


@bp.route("/urls/<int:id>")
def show_url(id):
    store = get_store()
    url = store.find_url_by_id(id)
    if url is None:
        abort(404)

    checks = store.all_checks_for_url(id)
    return render_template("url.html", url=url, checks=checks)


@bp.post("/urls/<int:id>/checks")
def create_check(id):
    outcome = perform_check(
        get_store(), id, timeout=current_app.config["REQUEST_TIMEOUT"]
    )
    if isinstance(outcome.error, NotFoundError):
        abort(404)

    flash(outcome.message, outcome.category)
    return redirect(url_for("urls.show_url", id=id))


@bp.post("/urls/<int:id>/delete")
def delete_url(id):
    if not get_store().delete_url(id):
        abort(404)

    flash("Страница удалена", "success")
    return redirect(url_for("urls.list_urls"))
