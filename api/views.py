"""
api/views.py
============
DRF views for the fault diagnosis REST API.

Contains:
    - ServiceRootAPIView: GET banner.
    - HealthCheckAPIView: GET connectivity check.
    - RuleListAPIView: GET the loaded forward and backward rule sets.
    - RuleRecordListAPIView: ListAPIView over stored rules with filtering.
    - ForwardDiagnosisAPIView: POST endpoint running ForwardChainingStrategy.
    - BackwardDiagnosisAPIView: POST endpoint running BackwardChainingStrategy.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError, connection
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from inference_engine.services import (
    BackwardChainingStrategy,
    DiagnosisService,
    ForwardChainingStrategy,
    InferenceEngineError,
    InferenceInternalError,
    InferenceStrategy,
    InvalidFactError,
    RuleBase,
    SearchLimitExceededError,
    diagnosis_settings,
    get_rule_base,
)
from knowledge_base.models import RuleModel

from .serializers import (
    BackwardDiagnosisRequestSerializer,
    ForwardDiagnosisRequestSerializer,
    RuleBaseSerializer,
    RuleRecordSerializer,
)

logger = logging.getLogger(__name__)


def server_error(message: str = "An unexpected error occurred.") -> Response:
    return Response({"error": message}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


def run_diagnosis(
    build_strategy: Callable[[RuleBase], InferenceStrategy],
    facts: list[str],
    **kwargs,
) -> Response:
    """Build a strategy over the loaded rule base, run it through
    :class:`DiagnosisService` and map errors to responses."""
    try:
        strategy = build_strategy(get_rule_base())
        service = DiagnosisService(strategy=strategy)
        result = service.diagnose(facts=facts, **kwargs)
        return Response(result, status=status.HTTP_200_OK)
    except ImproperlyConfigured:
        logger.exception("Rule base could not be loaded")
        return server_error("The rule base is unavailable.")
    except SearchLimitExceededError as exc:
        logger.warning("Diagnosis search exhausted: %s", exc.message)
        return Response(
            {"error": exc.message, "details": exc.details},
            status=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )
    except InvalidFactError as exc:
        logger.warning("Diagnosis rejected: %s", exc.message)
        return Response(
            {"error": exc.message, "details": exc.details},
            status=status.HTTP_400_BAD_REQUEST,
        )
    except InferenceInternalError:
        # already logged with its traceback by the service
        return server_error()
    except InferenceEngineError as exc:
        logger.warning("Diagnosis failed: %s", exc.message)
        return Response(
            {"error": exc.message, "details": exc.details},
            status=status.HTTP_400_BAD_REQUEST,
        )
    except Exception:
        logger.exception("Unexpected error during API diagnosis")
        return server_error()


# ─────────────────────────────────────────────────────────────────────
# Service status
# ─────────────────────────────────────────────────────────────────────


class ServiceRootAPIView(APIView):
    """**GET** ``/``"""

    def get(self, request):
        return Response({"message": "Symbolic Fault Diagnosis API"})


class HealthCheckAPIView(APIView):
    """Report whether the backend and its database are reachable.

    **GET** ``/test``
    """

    def get(self, request):
        try:
            connection.ensure_connection()
            database = "ok"
        except DatabaseError:
            logger.warning("health check could not reach the database")
            database = "unavailable"
        return Response(
            {
                "backend": "running",
                "database": database,
                "rule_source": diagnosis_settings()["RULE_SOURCE"],
            }
        )


# ─────────────────────────────────────────────────────────────────────
# Rule listing
# ─────────────────────────────────────────────────────────────────────


class RuleListAPIView(APIView):
    """List the rule sets the engines are running with.

    **GET** ``/rules``

    Response body::

        {
            "forward_rules": [{"antecedents": [...], "consequent": "..."}],
            "backward_rules": [...],
            "fault_prefix": "fault_"
        }
    """

    def get(self, request):
        try:
            rule_base = get_rule_base()
        except ImproperlyConfigured:
            logger.exception("Rule base could not be loaded")
            return server_error("The rule base is unavailable.")
        return Response(RuleBaseSerializer(rule_base).data)


class RuleRecordListAPIView(generics.ListAPIView):
    """List stored rules with optional filtering.

    Stored rules only reach the engines with the ``database`` rule
    source, and only after a restart.

    **Filters** (query params):
        - ``chain``: exact match (e.g. ``?chain=BACKWARD``)
        - ``consequent``: exact match (e.g. ``?consequent=fault_battery``)
        - ``search``: partial match on ``consequent`` and ``description``
        - ``ordering``: sort by any field (e.g. ``?ordering=-position``)
    """

    queryset = RuleModel.objects.all()
    serializer_class = RuleRecordSerializer
    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]
    filterset_fields = ["chain", "consequent"]
    search_fields = ["consequent", "description"]
    ordering_fields = ["chain", "position", "consequent"]
    ordering = ["chain", "position"]


# ─────────────────────────────────────────────────────────────────────
# Diagnosis endpoints
# ─────────────────────────────────────────────────────────────────────


class ForwardDiagnosisAPIView(APIView):
    """Derive every consequence of the facts and the candidate faults.

    **POST** ``/diagnose/forward``

    Request body::

        {"facts": ["battery_low", "charging_not_working"]}
    """

    def post(self, request):
        serializer = ForwardDiagnosisRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        return run_diagnosis(ForwardChainingStrategy, serializer.validated_data["facts"])


class BackwardDiagnosisAPIView(APIView):
    """Try to prove a goal from the facts.

    **POST** ``/diagnose/backward``

    Request body::

        {"facts": ["battery_low"], "goal": "fault_power_supply"}

    ``provable: false`` is a normal 200 response.
    """

    def post(self, request):
        serializer = BackwardDiagnosisRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        config: dict = diagnosis_settings()
        return run_diagnosis(
            lambda rule_base: BackwardChainingStrategy(
                rule_base,
                max_depth=config["MAX_PROOF_DEPTH"],
                max_steps=config["MAX_PROOF_STEPS"],
            ),
            serializer.validated_data["facts"],
            goal=serializer.validated_data["goal"],
        )
