import asyncio
from procurement_intake.database import db

async def verify():
    print("Connecting to database...")
    db.connect()

    if db.client:
        print("✅ Client initialized")
    else:
        print("❌ Client NOT initialized")

    if db.requests and db.commodity_groups:
        print("✅ Repositories initialized")
    else:
        print("❌ Repositories NOT initialized")

    try:
        await db.client.admin.command('ping')
        print("✅ Database connection successful (Ping)")
        groups = await db.commodity_groups.count()
        print(f"ℹ️  {groups} commodity groups seeded")
    except Exception as e:
        print(f"❌ Database connection failed: {e}")

    db.close()

if __name__ == "__main__":
    asyncio.run(verify())
