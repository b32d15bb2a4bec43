from fastapi import APIRouter, BackgroundTasks, Request

from api.services.webhook_service import WebhookDispatcher, WebhookVerifier

router = APIRouter(tags=["hooks"])
verifier = WebhookVerifier()
dispatcher = WebhookDispatcher()


@router.post("/webhook")
async def payment_webhook(request: Request, background_tasks: BackgroundTasks):
    # Raw bytes: the signature covers the body exactly as sent.
    payload = await request.body()
    event = verifier.verify(payload, request.headers.get("stripe-signature"))
    dispatcher.dispatch(event, background_tasks.add_task)
    return {"received": True}
