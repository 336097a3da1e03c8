"""Tour router: tour CRUD plus the reservations made against tours."""

import logging
from datetime import datetime, timedelta
from typing import Union

from fastapi import APIRouter, Query, Response

from ..core.config import Settings
from ..core.dependencies import (
    PathId,
    ReservationRepositoryDependency,
    SettingsDependency,
    TourRepositoryDependency,
    UserRepositoryDependency,
)
from ..core.exceptions import (
    BusinessRuleError,
    InternalServerError,
    NotFoundError,
    OwnershipError,
    ProblemDetailsException,
    ValidationError,
)
from ..core.observability import metrics_collector
from ..models import Reservation, Tour
from ..models.base import MAX_DB_INTEGER
from ..repositories import ReservationRepository, TourRepository, UserRepository
from ..schemas.common import PROBLEM_RESPONSES, MessageResponse
from ..schemas.reservation import CreateReservationRequest
from ..schemas.tour import PagedTours, normalize_ordering

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tours", tags=["tours"], responses=PROBLEM_RESPONSES)

# Keeps the OFFSET of any page within SQLite's integer range
MAX_PAGE = 2**31 - 1


def _normalize_paging(page: int, page_size: int, cfg: Settings) -> tuple[int, int]:
    if page < 1:
        page = 1
    if page_size < 1 or page_size > cfg.max_page_size:
        page_size = cfg.default_page_size
    return page, page_size


# Reservation routes are registered before "/{tour_id}" so that
# "/reservations" is never read as a tour ID.

@router.get("/reservations", response_model=list[Reservation])
async def get_tourist_reservations(
    tourist_id: int = Query(0, alias="touristId", le=MAX_DB_INTEGER),
    reservations: ReservationRepository = ReservationRepositoryDependency,
) -> list[Reservation]:
    """List a tourist's reservations, newest first, with tour and user display fields."""
    try:
        if tourist_id < 0:
            raise ValidationError("Tourist ID is required.")

        return await reservations.get_by_user_id(tourist_id)

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error while fetching reservations",
            extra={"tourist_id": tourist_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("An error occurred while fetching reservations.") from e


@router.delete("/reservations/{reservation_id}", response_model=MessageResponse)
async def cancel_reservation(
    reservation_id: PathId,
    user_id: int = Query(0, alias="userId", le=MAX_DB_INTEGER),
    tours: TourRepository = TourRepositoryDependency,
    users: UserRepository = UserRepositoryDependency,
    reservations: ReservationRepository = ReservationRepositoryDependency,
    cfg: Settings = SettingsDependency,
) -> MessageResponse:
    """
    Cancel (delete) a reservation on behalf of its owner.

    Only the user who made the reservation may cancel it, and only while
    the tour starts at least ``cancellation_cutoff_hours`` from now.
    """
    try:
        if user_id < 0:
            raise ValidationError("Valid user ID is required.")

        user = await users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("user", user_id)

        reservation = await reservations.get_by_id(reservation_id)
        if reservation is None:
            raise NotFoundError("reservation", reservation_id)

        if reservation.user_id != user_id:
            metrics_collector.record_reservation_rejected("ownership")
            logger.warning(
                "Cancellation refused - reservation belongs to another user",
                extra={
                    "reservation_id": reservation_id,
                    "owner_id": reservation.user_id,
                    "user_id": user_id
                }
            )
            raise OwnershipError("You can only cancel your own reservations.")

        tour = await tours.get_by_id(reservation.tour_id)
        if tour is None:
            raise InternalServerError(
                f"Tour with ID {reservation.tour_id} not found for this reservation."
            )

        time_until_tour = tour.date_time - datetime.now()
        if time_until_tour < timedelta(hours=cfg.cancellation_cutoff_hours):
            metrics_collector.record_reservation_rejected("cutoff")
            raise BusinessRuleError(
                f"Cannot cancel reservation less than {cfg.cancellation_cutoff_hours} "
                "hours before tour start.",
                code="CANCELLATION_CUTOFF",
                extensions={"tour_start": tour.date_time.isoformat()},
            )

        if not await reservations.cancel_reservation(reservation_id):
            raise InternalServerError("Failed to cancel reservation.")

        metrics_collector.record_reservation_cancelled()
        logger.info(
            "Reservation cancelled",
            extra={"reservation_id": reservation_id, "user_id": user_id, "tour_id": tour.id}
        )
        return MessageResponse(message="Reservation cancelled successfully.")

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error while cancelling reservation",
            extra={"reservation_id": reservation_id, "user_id": user_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("An error occurred while cancelling the reservation.") from e


@router.get("", response_model=Union[PagedTours, list[Tour]])
async def get_tours(
    guide_id: int = Query(0, alias="guideId", le=MAX_DB_INTEGER),
    page: int = Query(1, le=MAX_PAGE),
    page_size: int = Query(10, alias="pageSize"),
    order_by: str = Query("Name", alias="orderBy"),
    order_direction: str = Query("ASC", alias="orderDirection"),
    status: str = Query(""),
    tours: TourRepository = TourRepositoryDependency,
    cfg: Settings = SettingsDependency,
) -> Union[PagedTours, list[Tour]]:
    """
    List tours.

    With ``guideId`` the guide's tours are returned as a plain list.
    Otherwise one page is returned as ``{data, totalCount}``; unknown
    ``orderBy``/``orderDirection`` values fall back to Name/ASC.
    """
    try:
        if guide_id > 0:
            return await tours.get_by_guide(guide_id)

        order_by, order_direction = normalize_ordering(order_by, order_direction)
        page, page_size = _normalize_paging(page, page_size, cfg)

        data = await tours.get_paged(page, page_size, order_by, order_direction, status)
        total_count = await tours.count_all(status)
        return PagedTours(data=data, total_count=total_count)

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error while fetching tours",
            extra={"guide_id": guide_id, "page": page, "page_size": page_size, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("An error occurred while fetching tours.") from e


@router.get("/{tour_id}", response_model=Tour)
async def get_tour(
    tour_id: PathId,
    tours: TourRepository = TourRepositoryDependency,
) -> Tour:
    try:
        tour = await tours.get_by_id(tour_id)
        if tour is None:
            raise NotFoundError("tour", tour_id)
        return tour

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error while fetching tour",
            extra={"tour_id": tour_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("An error occurred while fetching the tour.") from e


@router.post("", response_model=Tour)
async def create_tour(
    new_tour: Tour,
    tours: TourRepository = TourRepositoryDependency,
    users: UserRepository = UserRepositoryDependency,
) -> Tour:
    """Create a tour owned by an existing guide."""
    if not new_tour.is_valid():
        raise ValidationError("Invalid tour data.")

    try:
        guide = await users.get_by_id(new_tour.guide_id)
        if guide is None:
            raise NotFoundError("user", new_tour.guide_id)

        created = await tours.create(new_tour)
        metrics_collector.record_tour_created()

        logger.info(
            "Tour created successfully",
            extra={"tour_id": created.id, "guide_id": created.guide_id, "tour_name": created.name}
        )
        return created

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in tour creation",
            extra={"guide_id": new_tour.guide_id, "tour_name": new_tour.name, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("An error occurred while creating the tour.") from e


@router.put("/{tour_id}", response_model=Tour)
async def update_tour(
    tour_id: PathId,
    tour: Tour,
    tours: TourRepository = TourRepositoryDependency,
) -> Tour:
    """Replace a tour; the ID in the path wins over any ID in the body."""
    if not tour.is_valid():
        raise ValidationError("Invalid tour data.")

    try:
        updated = await tours.update(tour.model_copy(update={"id": tour_id}))
        if updated is None:
            raise NotFoundError("tour", tour_id)
        return updated

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in tour update",
            extra={"tour_id": tour_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("An error occurred while updating the tour.") from e


@router.delete("/{tour_id}", status_code=204, response_class=Response)
async def delete_tour(
    tour_id: PathId,
    tours: TourRepository = TourRepositoryDependency,
) -> Response:
    try:
        if not await tours.delete(tour_id):
            raise NotFoundError("tour", tour_id)

        logger.info("Tour deleted", extra={"tour_id": tour_id})
        return Response(status_code=204)

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in tour deletion",
            extra={"tour_id": tour_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("An error occurred while deleting the tour.") from e


@router.get("/{tour_id}/reservations", response_model=list[Reservation])
async def get_tour_reservations(
    tour_id: PathId,
    tours: TourRepository = TourRepositoryDependency,
    reservations: ReservationRepository = ReservationRepositoryDependency,
) -> list[Reservation]:
    """List every reservation made for a tour."""
    try:
        if await tours.get_by_id(tour_id) is None:
            raise NotFoundError("tour", tour_id)

        return await reservations.get_by_tour_id(tour_id)

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error while fetching tour reservations",
            extra={"tour_id": tour_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("An error occurred while fetching reservations.") from e


@router.post("/{tour_id}/reservations", response_model=Reservation)
async def create_reservation(
    tour_id: PathId,
    request: CreateReservationRequest,
    user_id: int = Query(0, alias="userId", le=MAX_DB_INTEGER),
    tours: TourRepository = TourRepositoryDependency,
    users: UserRepository = UserRepositoryDependency,
    reservations: ReservationRepository = ReservationRepositoryDependency,
) -> Reservation:
    """
    Book a tour for a user.

    The booked guests of all Active reservations plus this request must fit
    into the tour's ``maxGuests``. The check and the insert are separate
    statements, so concurrent requests can still overbook.
    """
    try:
        if user_id < 0:
            raise ValidationError("Valid user ID is required.")

        reservation = Reservation(
            tour_id=tour_id,
            user_id=user_id,
            number_of_guests=request.number_of_guests,
        )
        if not reservation.is_valid():
            metrics_collector.record_reservation_rejected("invalid")
            raise ValidationError("Invalid reservation data.")

        tour = await tours.get_by_id(tour_id)
        if tour is None:
            raise NotFoundError("tour", tour_id)

        user = await users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("user", user_id)

        booked = await reservations.get_total_guests_for_tour(tour_id)
        if booked + reservation.number_of_guests > tour.max_guests:
            metrics_collector.record_reservation_rejected("capacity")
            raise BusinessRuleError(
                f"Not enough free places on tour {tour_id}: "
                f"{tour.max_guests - booked} left, {reservation.number_of_guests} requested.",
                code="CAPACITY_EXCEEDED",
                extensions={
                    "max_guests": tour.max_guests,
                    "booked_guests": booked,
                    "requested_guests": reservation.number_of_guests,
                },
            )

        created = await reservations.create(reservation)
        metrics_collector.record_reservation_created(created.number_of_guests)

        logger.info(
            "Reservation created successfully",
            extra={
                "reservation_id": created.id,
                "tour_id": tour_id,
                "user_id": user_id,
                "number_of_guests": created.number_of_guests
            }
        )
        return created

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in reservation creation",
            extra={"tour_id": tour_id, "user_id": user_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("An error occurred while creating the reservation.") from e
