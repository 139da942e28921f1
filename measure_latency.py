#!/usr/bin/env python3
"""
Latency measurement script for the clinic read endpoints
Measures GET /patients, GET /appointments, GET /checkups, GET /dashboard/stats, GET /dashboard/appointments-chart
"""
import time
import requests
import statistics
import sys

API_BASE = "http://127.0.0.1:8000/api"
NUM_ITERATIONS = 10


def measure_endpoint(name: str, url: str, headers: dict):
    """Measure latency for a single endpoint"""
    times = []
    errors = 0
    
    print(f"\nMeasuring {name}...")
    
    for i in range(NUM_ITERATIONS):
        start = time.time()
        try:
            response = requests.get(url, headers=headers, timeout=5)
            duration = (time.time() - start) * 1000  # Convert to ms
            times.append(duration)
            if response.status_code != 200:
                errors += 1
                print(f"  Iteration {i+1}: {response.status_code} - {duration:.2f}ms")
            else:
                print(f"  Iteration {i+1}: {duration:.2f}ms")
        except requests.RequestException as e:
            errors += 1
            duration = (time.time() - start) * 1000
            print(f"  Iteration {i+1}: ERROR - {e} ({duration:.2f}ms)")
    
    if times:
        avg = statistics.mean(times)
        median = statistics.median(times)
        min_time = min(times)
        max_time = max(times)
        p95 = statistics.quantiles(times, n=20)[18] if len(times) > 1 else times[0]
        
        print(f"\n  Results for {name}:")
        print(f"    Average: {avg:.2f}ms")
        print(f"    Median:  {median:.2f}ms")
        print(f"    Min:     {min_time:.2f}ms")
        print(f"    Max:     {max_time:.2f}ms")
        print(f"    P95:     {p95:.2f}ms")
        print(f"    Errors:  {errors}/{NUM_ITERATIONS}")
        return {
            'name': name,
            'avg': avg,
            'median': median,
            'min': min_time,
            'max': max_time,
            'p95': p95,
            'errors': errors
        }
    else:
        print(f"  ERROR: All requests failed for {name}")
        return None


ENDPOINTS = [
    "/patients",
    "/appointments",
    "/checkups",
    "/dashboard/stats",
    "/dashboard/appointments-chart",
]


def seed(headers: dict):
    """Create one patient with an appointment and a checkup so reads have data"""
    patient_response = requests.post(
        f"{API_BASE}/patients",
        headers=headers,
        json={
            "name": "Latency Test Patient",
            "age": 45,
            "gender": "F",
            "phone": "555-0000",
            "address": "1 Test Road"
        },
        timeout=5
    )
    if patient_response.status_code != 201:
        print(f"⚠️  Patient creation returned {patient_response.status_code}")
        return
    patient_id = patient_response.json()["id"]
    print(f"✅ Test patient created (id={patient_id})")

    requests.post(
        f"{API_BASE}/appointments",
        headers=headers,
        json={"patientId": patient_id, "date": time.strftime("%Y-%m-%d"), "time": "09:00", "reason": "Latency check"},
        timeout=5
    )
    requests.post(
        f"{API_BASE}/checkups",
        headers=headers,
        json={"patientId": patient_id, "date": time.strftime("%Y-%m-%d"), "symptoms": "None", "diagnosis": "Healthy"},
        timeout=5
    )


def main():
    """Run latency measurements"""
    headers = {
        'Content-Type': 'application/json'
    }
    
    print("Setting up test data...")
    try:
        seed(headers)
    except requests.RequestException as e:
        print(f"⚠️  Could not create test data: {e}")
        print("   Continuing with measurements anyway...")
    
    # Measure endpoints
    results = []
    for path in ENDPOINTS:
        result = measure_endpoint(f"GET /api{path}", f"{API_BASE}{path}", headers)
        if result:
            results.append(result)
    
    # Summary
    print("\n" + "="*60)
    print("SUMMARY")
    print("="*60)
    if results:
        total_avg = sum(r['avg'] for r in results) / len(results)
        print(f"\nAverage latency across all endpoints: {total_avg:.2f}ms")
        print("\nPer-endpoint averages:")
        for r in results:
            print(f"  {r['name']:36} {r['avg']:7.2f}ms (median: {r['median']:.2f}ms)")
    else:
        print("No successful measurements")
        sys.exit(1)


if __name__ == "__main__":
    main()
