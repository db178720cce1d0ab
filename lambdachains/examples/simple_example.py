"""
Simple example demonstrating a handler behind a middleware chain.
"""

import asyncio
import time

from lambdachains import Middleware, SanitizeErrorsMiddleware, lambda_handler


# Define the handler
def greet(event, context):
    name = event.get('name', 'World')
    context.log.info('greeting', name=name)
    return {'statusCode': 200, 'body': f"Hello, {name}! (at {event['timestamp']})"}


# Define middleware
class TimingMiddleware(Middleware):
    async def execute(self, event, context, next_callable):
        start = time.perf_counter()
        await next_callable()
        elapsed = (time.perf_counter() - start) * 1000
        context.log.info('timing', elapsed_ms=round(elapsed, 2))


def add_timestamp(event, context, next_callable):
    import datetime
    timestamp = datetime.datetime.now().isoformat()
    return next_callable(None, None, dict(event, timestamp=timestamp))


async def require_name(event, context, next_callable):
    if not event.get('name'):
        return {'statusCode': 400, 'body': 'name is required'}
    await next_callable(None, context.child(user=event['name']))


handler = (lambda_handler(greet)
    .use(TimingMiddleware())
    .use(SanitizeErrorsMiddleware())
    .use(require_name)
    .use(add_timestamp))


def main():
    print("=" * 60)
    print("lambdachains Simple Example")
    print("=" * 60)
    print()

    print(f"Handler built: {handler}")
    print()

    context = {
        'function_name': 'greeter',
        'aws_request_id': '00112233445566778899',
        'function_version': '$LATEST',
    }

    print("Invoking handler...")
    print("-" * 60)

    def callback(error, result):
        if error:
            print(f"✗ Invocation failed: {error}")
        else:
            print(f"✓ Invocation succeeded: {result}")

    asyncio.run(handler({'name': 'Alice'}, context, callback))
    asyncio.run(handler({}, context, callback))

    print("-" * 60)
    print()
    print("=" * 60)


if __name__ == "__main__":
    main()
