from app.tasks.celery_app import celery
from app.tasks import worker_jobs

@celery.task(name="app.tasks.jobs.send_sms_message", max_retries=0)
def send_sms_message(message_id: str):
    return worker_jobs.send_sms_message(message_id)


@celery.task(name="app.tasks.jobs.notify_admins_of_new_booking", max_retries=0)
def notify_admins_of_new_booking(booking_id: str):
    return worker_jobs.notify_admins_of_new_booking(booking_id)
