"""
Export endpoint as a Flask Blueprint.

POST /api/export/<kind>/<fmt>
    kind: summary | transcript
    fmt:  word | pdf
    Body: {"sessionId": "..."}

Returns the finished file as an attachment, or a JSON error. A document is
either built completely or not sent at all.
"""

from io import BytesIO

from flask import Blueprint, request, jsonify, send_file

import app_config
from chat_logger import get_logger, sanitize_log_string
from models import ExportFormat, ExportKind
from services import (
    build_pdf_document,
    build_word_document,
    summarize_history,
    summary_sections,
    transcript_sections,
)
from . import get_store, get_provider

logger = get_logger()

export_bp = Blueprint("export", __name__)

_TITLES = {
    ExportKind.SUMMARY: "Summary",
    ExportKind.TRANSCRIPT: "Full Transcript",
}

_BUILDERS = {
    ExportFormat.WORD: (build_word_document, app_config.DOCX_MIMETYPE),
    ExportFormat.PDF: (build_pdf_document, app_config.PDF_MIMETYPE),
}


@export_bp.route("/api/export/<kind>/<fmt>", methods=["POST"])
def export(kind, fmt):
    try:
        export_kind = ExportKind(kind)
        export_format = ExportFormat(fmt)
    except ValueError:
        return jsonify({"error": f"Unknown export type: {kind}/{fmt}"}), 404

    body = request.get_json(silent=True) or {}
    session_id = body.get("sessionId") if isinstance(body, dict) else None
    history = get_store().get(str(session_id)) if session_id else None

    if not history:
        logger.warning(f"POST /api/export/{kind}/{fmt} | session={sanitize_log_string(str(session_id))} | Nothing to export")
        return jsonify({"error": "No conversation to export"}), 400

    # Snapshot at request time
    history = list(history)

    try:
        if export_kind is ExportKind.SUMMARY:
            sections = summary_sections(summarize_history(get_provider(), history))
        else:
            sections = transcript_sections(history, app_config.ASSISTANT_NAME)

        builder, mimetype = _BUILDERS[export_format]
        title = f"{app_config.ASSISTANT_NAME} - {_TITLES[export_kind]}"
        data = builder(title, sections)
    except Exception:
        logger.exception(f"POST /api/export/{kind}/{fmt} | session={sanitize_log_string(str(session_id))} | Export failed")
        return jsonify({"error": f"Failed to export {export_kind.value}"}), 500

    filename = f"{app_config.EXPORT_FILENAME_PREFIX}-{export_kind.value}.{export_format.extension}"
    logger.info(
        f"POST /api/export/{kind}/{fmt} | session={sanitize_log_string(str(session_id))} | "
        f"messages={len(history)} | bytes={len(data)} | file={filename}"
    )
    return send_file(
        BytesIO(data),
        mimetype=mimetype,
        as_attachment=True,
        download_name=filename,
    )
