from flask import Blueprint, jsonify

from models import LearningModule
from utils.db import with_retry
from utils.errors import NotFoundError

modules_bp = Blueprint("modules", __name__)


@modules_bp.route("", methods=["GET"])
def list_modules():
    modules = with_retry(lambda: (
        LearningModule.query.filter_by(is_active=True).order_by(LearningModule.order).all()
    ))
    return jsonify({"modules": [module.to_dict() for module in modules]})


@modules_bp.route("/<string:slug>", methods=["GET"])
def get_module(slug):
    module = with_retry(lambda: LearningModule.query.filter_by(slug=slug).first())
    if not module:
        raise NotFoundError("Module")
    return jsonify({"module": module.to_dict()})
